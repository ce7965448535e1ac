"""
Data types and structures for rf95modem.

Provides type-safe representations of modem data.
"""

from dataclasses import dataclass
from enum import IntEnum

from .exceptions import ModeRangeError


class ModemMode(IntEnum):
    """
    RFM95 modem configuration (AT+MODE).

    Names follow the RadioHead ModemConfigChoice naming:
    bandwidth in kHz, coding rate 4/x and spreading factor chips/symbol.
    """
    BW125_CR45_SF128 = 0    # Medium range
    BW500_CR45_SF128 = 1    # Fast, short range
    BW31_25_CR48_SF512 = 2  # Slow, long range
    BW125_CR48_SF4096 = 3   # Slow, long range
    BW125_CR45_SF2048 = 4   # Slow, long range

    @classmethod
    def from_value(cls, value: int) -> "ModemMode":
        """
        Build a ModemMode from its integer value.

        Raises:
            ModeRangeError: If value is not in [0, MAX_MODEM_MODE]
        """
        if value < 0 or value > MAX_MODEM_MODE:
            raise ModeRangeError(value, MAX_MODEM_MODE)
        return cls(value)


MAX_MODEM_MODE = int(max(ModemMode))


@dataclass(frozen=True)
class Status:
    """
    Modem status from AT+INFO.

    ``Status()`` is the zero value. A Status returned by the library has
    every field set from the modem's response.
    """
    firmware: str = ""
    features: tuple[str, ...] = ()
    mode: ModemMode = ModemMode.BW125_CR45_SF128
    mtu: int = 0                # Max packet size in bytes
    frequency: float = 0.0      # MHz
    bfb: int = 0                # Big funky BLE frames
    rx_bad: int = 0
    rx_good: int = 0
    tx_good: int = 0

    def __str__(self) -> str:
        return (
            f"Status(firmware={self.firmware},"
            f"features={','.join(self.features)},"
            f"mode={int(self.mode)},"
            f"mtu={self.mtu},"
            f"frequency={self.frequency:.2f},"
            f"big_funky_ble_frames={self.bfb},"
            f"rx_bad={self.rx_bad},"
            f"rx_good={self.rx_good},"
            f"tx_good={self.tx_good})"
        )
