"""Length conversions to English Metric Units (914400 EMU per inch)."""

EMU_PER_INCH = 914400
EMU_PER_CM = 360000
EMU_PER_PIXEL = 9525  # at 96 DPI


def pixels_to_emu(pixels: float) -> int:
    return round(pixels * EMU_PER_PIXEL)


def inches_to_emu(inches: float) -> int:
    return round(inches * EMU_PER_INCH)


def cm_to_emu(cm: float) -> int:
    return round(cm * EMU_PER_CM)
