class MedicareDetails:
    """Holds the Medicare rate and computes the employee contribution.

    Constructed with the statutory rate loaded from the reference file by the
    caller. Medicare has no wage base: every dollar of income is taxed.
    """

    def __init__(self, medicare_rate: float):
        """Initialize with statutory details.

        Args:
            medicare_rate: The Medicare tax rate.
        """
        self.medicare_rate = medicare_rate

    def total_contribution(self, gross_income: float) -> float:
        """Calculate the Medicare contribution.

        Args:
            gross_income: The employee's pre-tax income.

        Returns:
            The Medicare charge (0 for non-positive income).
        """
        return max(gross_income, 0.0) * self.medicare_rate
