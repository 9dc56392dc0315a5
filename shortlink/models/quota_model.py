from dataclasses import dataclass
from datetime import timedelta


# fmt: off
@dataclass(frozen=True)
class QuotaModel:
    client_key: str        # Client identity (e.g. source IP)
    remaining: int         # Link creations left in the current window
    reset_in: timedelta    # Time until the window's counter expires
# fmt: on

    @property
    def reset_in_minutes(self) -> int:
        """Remaining window, floored to whole minutes."""
        return max(int(self.reset_in.total_seconds()) // 60, 0)

    @property
    def exhausted(self) -> bool:
        return self.remaining <= 0
