"""Calculate X-Date use case."""

from datetime import date, timedelta

from app.domain.value_objects.calendar_date import add_years


class CalculateXDate:
    """Use case for deriving the X-Date (days before a policy renews)."""

    # Renewal workflows start 60 days ahead of the renewal date
    DEFAULT_LEAD_DAYS = 60

    def __init__(self, lead_days: int = DEFAULT_LEAD_DAYS) -> None:
        """
        Initialize calculator.

        Args:
            lead_days: Days between the X-Date and the renewal date
        """
        if lead_days < 0:
            raise ValueError("X-Date lead days cannot be negative")
        self._lead_days = lead_days

    @property
    def lead_days(self) -> int:
        """Days between the X-Date and the renewal date."""
        return self._lead_days

    def renewal_date_for(self, effective_date: date) -> date:
        """
        Get the renewal date of a one-year term.

        Args:
            effective_date: Policy effective date

        Returns:
            Effective date plus one calendar year
        """
        return add_years(effective_date, 1)

    def from_renewal_date(self, renewal_date: date) -> date:
        """
        Calculate the X-Date for a known renewal date.

        Args:
            renewal_date: Policy renewal date

        Returns:
            X-Date
        """
        return renewal_date - timedelta(days=self._lead_days)

    def from_effective_date(self, effective_date: date) -> date:
        """
        Calculate the X-Date for new business.

        Args:
            effective_date: Policy effective date

        Returns:
            X-Date for the first renewal
        """
        return self.from_renewal_date(self.renewal_date_for(effective_date))
