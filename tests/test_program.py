import os
import sys
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import Program
from render.renderers import RENDERER_REGISTRY


FIXTURES_DIR = os.path.join(os.path.dirname(__file__), 'mcp_server_tests', 'fixtures')


def test_calculate_program1():
    data = Program.calculate_program('program1')
    assert data.program_name == 'program1'
    assert data.state == 'CA'
    assert data.summary.user.pre_tax_income == 85000
    # health insurance + traditional 401(k) entered in program1/spec.json
    assert data.user_pre_tax_expenses == pytest.approx(2400 + 5000)
    assert 0 < data.summary.user.after_tax_income < 85000


def test_calculate_program_from_other_input_dir():
    data = Program.calculate_program('testprogram', input_dir=FIXTURES_DIR)
    assert data.baseline.after_tax_income == pytest.approx(654174.55, abs=0.01)


def test_calculate_program_missing_spec(tmp_path):
    with pytest.raises(FileNotFoundError, match="Spec file not found"):
        Program.calculate_program('nonexistent', input_dir=str(tmp_path))


def test_spec_path_for():
    path = Program.spec_path_for('program1', '/tmp/inputs')
    assert path == os.path.join('/tmp/inputs', 'program1', 'spec.json')


def test_main_default_mode_prints_summary(capsys):
    Program.main(['program1'])
    out = capsys.readouterr().out
    assert 'FINANCIAL SUMMARY' in out
    assert 'program1' in out


@pytest.mark.parametrize("mode", list(RENDERER_REGISTRY.keys()))
def test_main_every_mode_renders(mode, capsys):
    Program.main(['program1', '--mode', mode])
    assert capsys.readouterr().out.strip() != ''


def test_main_mortgage_schedule_is_longer(capsys):
    Program.main(['program1', '--mode', 'Mortgage'])
    short = capsys.readouterr().out
    Program.main(['program1', '--mode', 'Mortgage', '--schedule'])
    full = capsys.readouterr().out
    assert len(full.splitlines()) > len(short.splitlines())


def test_main_unknown_program_exits(capsys):
    with pytest.raises(SystemExit) as exc:
        Program.main(['nonexistent'])
    assert exc.value.code == 1
    assert 'Spec file not found' in capsys.readouterr().out


def test_main_invalid_inputs_exits(tmp_path, monkeypatch, capsys):
    program_dir = tmp_path / 'broken'
    program_dir.mkdir()
    (program_dir / 'spec.json').write_text('{"topInputs": {"housingCostTier": "Huge"}}')
    monkeypatch.setattr(Program, 'INPUT_DIR', str(tmp_path))
    with pytest.raises(SystemExit) as exc:
        Program.main(['broken'])
    assert exc.value.code == 1
    assert "Invalid input for program 'broken'" in capsys.readouterr().out


def test_main_rejects_unknown_mode():
    with pytest.raises(SystemExit):
        Program.main(['program1', '--mode', 'Paycheck'])
