"""Tests for the MCP server tools module."""

import os
import sys
import json
import shutil
import tempfile
import pytest

# Add src and mcp-server to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server')))

from tools import CourseTools, MultiProgramTools


# Path to test fixtures
FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'fixtures'))

# Path to the project root (for reference files)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '../..'))


def _make_base_path():
    """Temp directory with input-parameters/testprogram and a symlinked reference/."""
    temp_dir = tempfile.mkdtemp()

    # Copy the test program from fixtures
    input_params_dir = os.path.join(temp_dir, 'input-parameters')
    os.makedirs(input_params_dir)
    shutil.copytree(
        os.path.join(FIXTURES_PATH, 'testprogram'),
        os.path.join(input_params_dir, 'testprogram')
    )

    # Symlink the reference directory from the project root
    os.symlink(
        os.path.join(PROJECT_ROOT, 'reference'),
        os.path.join(temp_dir, 'reference')
    )
    return temp_dir


@pytest.fixture(scope="module")
def test_base_path():
    """Shared read-only base path for the module."""
    temp_dir = _make_base_path()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def writable_base_path():
    """Fresh base path for tests that add or remove programs."""
    temp_dir = _make_base_path()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


class TestCourseTools:
    """Tests for CourseTools class."""

    @pytest.fixture
    def tools(self, test_base_path):
        """Create a CourseTools instance using testprogram."""
        return CourseTools(test_base_path, 'testprogram')

    def test_init_loads_inputs(self, tools):
        assert tools.inputs.top.pre_tax_income == 1000000
        assert tools.inputs.top.state == 'TX'
        assert tools.plan_data is not None
        assert tools.spec_path.endswith(os.path.join('testprogram', 'spec.json'))

    def test_missing_program_raises(self, test_base_path):
        with pytest.raises(FileNotFoundError):
            CourseTools(test_base_path, 'nonexistent')

    def test_get_financial_summary(self, tools):
        summary = tools.get_financial_summary()

        assert summary['state'] == 'TX'
        assert summary['filing_status'] == 'a single filer'
        assert summary['user']['after_tax_income'] == pytest.approx(654174.55, abs=0.01)
        assert summary['user']['monthly_after_tax_income'] == pytest.approx(654174.55 / 12, abs=0.01)
        assert summary['suggested']['pre_tax_expenses'] == pytest.approx(summary['suggested_pre_tax_expenses'])
        assert summary['user_pre_tax_expenses'] == 0.0
        assert 'federal_tax' in summary['field_descriptions']
        assert summary['warnings'] == []

    def test_summary_is_json_serializable(self, tools):
        json.dumps(tools.get_financial_summary())

    def test_get_budget_all_sections(self, tools):
        budget = tools.get_budget()

        section_ids = [s['id'] for s in budget['sections']]
        assert 'housing' in section_ids
        assert 'retirement' in section_ids
        assert budget['total_entered'] == pytest.approx(42000)
        assert not budget['over_budget']

    def test_get_budget_single_section(self, tools):
        budget = tools.get_budget('housing')

        assert len(budget['sections']) == 1
        housing = budget['sections'][0]
        rent = next(item for item in housing['items'] if item['id'] == 'rent')
        assert rent['entered'] == 36000
        assert housing['recommended'] == pytest.approx(sum(i['recommended'] for i in housing['items']))

    def test_get_budget_unknown_section(self, tools):
        with pytest.raises(ValueError, match="not found"):
            tools.get_budget('yachts')

    def test_get_savings_goals(self, tools):
        savings = tools.get_savings_goals()

        slots = [g['slot'] for g in savings['goals']]
        assert slots == ['down_payment_2', 'car_1']
        car = savings['goals'][1]
        assert car['time_to_goal_months'] == 12
        assert savings['total_monthly_savings'] == pytest.approx(sum(g['monthly_savings'] for g in savings['goals']))

    def test_get_mortgage(self, tools):
        mortgage = tools.get_mortgage()

        assert mortgage['principal'] == 200000
        assert mortgage['monthly']['periods'] == 180
        assert 'schedule' not in mortgage['monthly']
        assert mortgage['accelerated_interest_saved'] > 0

    def test_get_mortgage_with_schedule(self, tools):
        mortgage = tools.get_mortgage(include_schedule=True)

        schedule = mortgage['monthly']['schedule']
        assert len(schedule) == 180
        assert schedule[0]['period'] == 1
        assert schedule[-1]['closing_balance'] == 0.0

    def test_get_retirement_projection_series(self, tools):
        projection = tools.get_retirement_projection()

        assert projection['weighted_return_percent'] == pytest.approx(7.25)
        assert len(projection['series']) == 79
        assert 'age' not in projection
        assert projection['match_401k']['final_balance'] > 0

    def test_get_retirement_projection_single_age(self, tools):
        projection = tools.get_retirement_projection(age=65)

        assert projection['age']['age'] == 65
        assert 'series' not in projection

    def test_get_retirement_projection_age_out_of_range(self, tools):
        with pytest.raises(ValueError, match="outside the projection"):
            tools.get_retirement_projection(age=10)

    def test_get_credit_card_payoff(self, tools):
        payoff = tools.get_credit_card_payoff()

        assert payoff['minimum']['payment'] == pytest.approx(50)
        assert payoff['user']['paid_off']
        assert payoff['interest_saved'] > 0

    def test_compare_health_plans(self, tools):
        comparison = tools.compare_health_plans()

        assert comparison['expected_expenses'] == 10000
        assert [p['name'] for p in comparison['plans']] == ['HDHP', 'Normal']
        assert comparison['cheaper_plan'] == 'HDHP'
        assert comparison['savings'] == pytest.approx(1600)


class TestMultiProgramTools:
    """Tests for MultiProgramTools class."""

    @pytest.fixture
    def multi_tools(self, test_base_path):
        return MultiProgramTools(test_base_path)

    def test_discovers_programs(self, multi_tools):
        assert 'testprogram' in multi_tools.programs
        assert multi_tools.default_program == 'testprogram'

    def test_explicit_default_program(self, test_base_path):
        tools = MultiProgramTools(test_base_path, default_program='testprogram')
        assert tools.default_program == 'testprogram'

    def test_programs_share_calculator(self, multi_tools):
        assert multi_tools.programs['testprogram'].calculator is multi_tools.calculator

    def test_list_programs(self, multi_tools):
        result = multi_tools.list_programs()

        assert result['available_programs'] == ['testprogram']
        assert result['default_program'] == 'testprogram'
        info = result['programs_info']['testprogram']
        assert info['pre_tax_income'] == 1000000
        assert info['state'] == 'TX'
        assert info['housing_cost_tier'] == 'Medium'

    def test_wrappers_add_program_name(self, multi_tools):
        assert multi_tools.get_financial_summary()['program'] == 'testprogram'
        assert multi_tools.get_savings_goals('testprogram')['program'] == 'testprogram'

    def test_unknown_program(self, multi_tools):
        with pytest.raises(ValueError, match="Program 'missing' not found"):
            multi_tools.get_mortgage(program='missing')

    def test_empty_base_path(self, tmp_path):
        os.symlink(os.path.join(PROJECT_ROOT, 'reference'), str(tmp_path / 'reference'))
        tools = MultiProgramTools(str(tmp_path))
        assert tools.programs == {}
        assert tools.default_program is None

    def test_bad_program_is_skipped(self, writable_base_path, capsys):
        bad_dir = os.path.join(writable_base_path, 'input-parameters', 'broken')
        os.makedirs(bad_dir)
        with open(os.path.join(bad_dir, 'spec.json'), 'w') as f:
            json.dump({"topInputs": {"housingCostTier": "Huge"}}, f)

        tools = MultiProgramTools(writable_base_path)
        assert list(tools.programs) == ['testprogram']
        assert "Failed to load program 'broken'" in capsys.readouterr().err

    def test_reload_programs(self, writable_base_path):
        tools = MultiProgramTools(writable_base_path)

        input_dir = os.path.join(writable_base_path, 'input-parameters')
        shutil.copytree(os.path.join(input_dir, 'testprogram'), os.path.join(input_dir, 'another'))
        result = tools.reload_programs()

        assert result['status'] == 'success'
        assert result['programs_loaded'] == ['another', 'testprogram']
        assert result['changes'] == {'added': ['another'], 'removed': [], 'reloaded': ['testprogram']}

        shutil.rmtree(os.path.join(input_dir, 'another'))
        result = tools.reload_programs()
        assert result['changes']['removed'] == ['another']

    def test_calculate_bracket_tax_federal(self, multi_tools):
        result = multi_tools.calculate_bracket_tax(985000)

        assert result['jurisdiction'] == 'federal'
        assert result['tax'] == pytest.approx(320407.25, abs=0.01)
        assert sum(b['tax'] for b in result['brackets']) == pytest.approx(result['tax'])
        assert result['effective_rate'] == pytest.approx(320407.25 / 985000, abs=1e-6)

    def test_calculate_bracket_tax_state(self, multi_tools):
        assert multi_tools.calculate_bracket_tax(100000, 'state', 'tx')['tax'] == 0.0
        result = multi_tools.calculate_bracket_tax(100000, 'state', 'ca')
        assert result['state'] == 'CA'
        assert result['tax'] > 0

    def test_calculate_bracket_tax_city(self, multi_tools):
        result = multi_tools.calculate_bracket_tax(100000, 'city')
        assert result['tax'] > 0

    def test_calculate_bracket_tax_zero_income(self, multi_tools):
        result = multi_tools.calculate_bracket_tax(0)
        assert result['tax'] == 0.0
        assert result['effective_rate'] == 0.0

    def test_calculate_bracket_tax_errors(self, multi_tools):
        with pytest.raises(ValueError, match="state is required"):
            multi_tools.calculate_bracket_tax(100000, 'state')
        with pytest.raises(ValueError, match="jurisdiction must be one of"):
            multi_tools.calculate_bracket_tax(100000, 'county')
