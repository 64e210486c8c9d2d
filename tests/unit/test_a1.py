import pytest

from utils.a1 import cell_range, column_letter


@pytest.mark.parametrize(
    "number, letter",
    [(1, "A"), (8, "H"), (26, "Z"), (27, "AA"), (52, "AZ"), (53, "BA"), (702, "ZZ"), (703, "AAA")],
)
def test_column_letter(number, letter):
    assert column_letter(number) == letter


def test_column_letter_rejects_zero():
    with pytest.raises(ValueError):
        column_letter(0)


def test_cell_range():
    assert cell_range("Sheet1", 7, 12) == "Sheet1!G12"
