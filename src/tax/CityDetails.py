import os
import json
from typing import List, Optional

from tax.brackets import BracketSlice, brackets_from_rows, bracket_tax, bracket_breakdown


class CityDetails:
    """City income tax tables (currently New York City only).

    A city tax applies only to residents of the city, and only when the
    filer's state matches the city's state.
    """

    def __init__(self, ref_path: Optional[str] = None):
        path = ref_path or os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'city-tax-details.json'))
        with open(path, 'r') as f:
            data = json.load(f)

        cities = data.get('cities', {})
        if not cities:
            raise ValueError("city-tax-details.json must contain a 'cities' object with at least one city")

        self.city_state = {}
        self.brackets_by_city = {}
        for code, city in cities.items():
            self.city_state[code] = city.get('state', '').upper()
            self.brackets_by_city[code] = brackets_from_rows(city.get('brackets', []))

    def applies(self, state: str, resident: bool, city: str = 'NYC') -> bool:
        return bool(resident) and self.city_state.get(city) == (state or '').upper()

    def taxBurden(self, taxable_income: float, city: str = 'NYC') -> float:
        if city not in self.brackets_by_city:
            raise ValueError(f"No city tax brackets available for '{city}'")
        return bracket_tax(self.brackets_by_city[city], taxable_income)

    def bracketBreakdown(self, taxable_income: float, city: str = 'NYC') -> List[BracketSlice]:
        if city not in self.brackets_by_city:
            raise ValueError(f"No city tax brackets available for '{city}'")
        return bracket_breakdown(self.brackets_by_city[city], taxable_income)
