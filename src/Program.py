import sys
import os
import argparse
import logging
from typing import Optional

from model.PlanData import PlanData
from model.PlanInputs import load_inputs
from calc.plan_calculator import PlanCalculator
from render.renderers import MortgageRenderer, RENDERER_REGISTRY


INPUT_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', 'input-parameters'))


def spec_path_for(program_name: str, input_dir: Optional[str] = None) -> str:
    return os.path.join(input_dir or INPUT_DIR, program_name, 'spec.json')


def calculate_program(program_name: str, input_dir: Optional[str] = None,
                      reference_dir: Optional[str] = None) -> PlanData:
    """Load a program's spec.json and run every calculation on it.

    Raises:
        FileNotFoundError: If the program has no spec.json
        ValueError: If the inputs or reference data are invalid
    """
    spec_path = spec_path_for(program_name, input_dir)
    if not os.path.exists(spec_path):
        raise FileNotFoundError(f"Spec file not found: {spec_path}")

    calculator = PlanCalculator.from_reference(reference_dir)
    inputs = load_inputs(spec_path, calculator.federal.retirement_limits)
    logging.debug("Loaded inputs for program '%s' from %s", program_name, spec_path)
    return calculator.calculate(inputs, program_name)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Personal finance course calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  Summary      Taxes and after-tax income, suggested vs entered (default)
  Budget       Recommended budget by section against the amounts entered
  Savings      Savings goals: months to goal or monthly amount needed
  Mortgage     Monthly, bi-weekly and accelerated bi-weekly payments
  Retirement   Age-by-age projection and the 401(k) employer match table
  CreditCard   Minimum payment vs your payment
  HealthPlans  Yearly cost of the two health plans
  TaxBrackets  How taxable income falls into each bracket

Examples:
  python src/Program.py program1
  python src/Program.py program1 --mode Budget
  python src/Program.py program1 --mode Mortgage --schedule
  python src/Program.py program1 --mode Retirement --verbose
        """
    )
    parser.add_argument('program_name', help='Name of the program (folder in input-parameters)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='Summary',
                        help='Output mode (default: Summary)')
    parser.add_argument('--schedule', '-s',
                        action='store_true',
                        help='With --mode Mortgage, print every payment of each schedule')
    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Print debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s: %(message)s',
    )

    try:
        data = calculate_program(args.program_name)
    except FileNotFoundError as e:
        print(e)
        sys.exit(1)
    except ValueError as e:
        print(f"Invalid input for program '{args.program_name}': {e}")
        sys.exit(1)

    if args.mode == 'Mortgage':
        renderer = MortgageRenderer(show_schedule=args.schedule)
    else:
        renderer = RENDERER_REGISTRY[args.mode]()
    renderer.render(data)


if __name__ == "__main__":
    main()
