"""Pytest configuration for the finance-course test suite."""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

# Async tool-server handlers are run through pytest-asyncio
pytest_plugins = ('pytest_asyncio',)

TESTPROGRAM_SPEC = os.path.join(os.path.dirname(__file__), 'mcp_server_tests', 'fixtures', 'testprogram', 'spec.json')


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test"
    )


@pytest.fixture(scope="session")
def calculator():
    """PlanCalculator over the project's reference tables."""
    from calc.plan_calculator import PlanCalculator
    return PlanCalculator.from_reference()


@pytest.fixture(scope="session")
def testprogram_plan(calculator):
    """PlanData for the $1,000,000 Texas fixture program."""
    from model.PlanInputs import load_inputs
    inputs = load_inputs(TESTPROGRAM_SPEC, calculator.federal.retirement_limits)
    return calculator.calculate(inputs, 'testprogram')
