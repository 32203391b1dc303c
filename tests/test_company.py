# tests/test_company.py
import pytest

from decorquote.company import get_settings, update_settings
from decorquote.errors import PaymentSplitError
from decorquote.records import SETTINGS, TaxRegime


def test_defaults_when_nothing_stored(store):
    s = get_settings(store)
    assert s.tax_regime is TaxRegime.FLAT_RATE
    assert (s.default_payment_deposit, s.default_payment_second, s.default_payment_balance) == (30, 30, 40)
    assert s.quote_prefix == "PRV"
    assert s.quote_start_number == 1
    # reading does not persist the defaults
    assert store.read(SETTINGS) is None


def test_partial_stored_settings_fill_from_defaults(store):
    store.write(SETTINGS, {"company_name": "Fiori di Anna", "vat_rate": 10})
    s = get_settings(store)
    assert s.company_name == "Fiori di Anna"
    assert s.vat_rate == 10
    assert s.quote_prefix == "PRV"


def test_update_settings_persists(store):
    update_settings(store, {"tax_regime": "ordinary", "vat_rate": 22, "quote_prefix": "EV"})
    s = get_settings(store)
    assert s.tax_regime is TaxRegime.ORDINARY
    assert s.quote_prefix == "EV"
    assert store.read(SETTINGS)["quote_prefix"] == "EV"


def test_payment_split_must_total_100(store):
    with pytest.raises(PaymentSplitError) as exc:
        update_settings(store, {"default_payment_deposit": 20, "default_payment_second": 30,
                                "default_payment_balance": 40})
    assert exc.value.observed == 90
    assert "currently 90%" in str(exc.value)
    assert store.read(SETTINGS) is None


def test_payment_split_error_is_a_value_error(store):
    with pytest.raises(ValueError):
        update_settings(store, {"default_payment_balance": 50})


def test_invalid_stored_fields_fall_back_to_defaults(store):
    store.write(SETTINGS, {"company_name": "Fiori di Anna", "quote_start_number": 0, "vat_rate": "abc"})
    s = get_settings(store)
    assert s.company_name == "Fiori di Anna"
    assert s.quote_start_number == 1
    assert s.vat_rate == 22


def test_settings_can_be_saved_over_invalid_stored_ones(store):
    store.write(SETTINGS, {"tax_regime": "somewhere-else"})
    update_settings(store, {"quote_prefix": "EV"})
    stored = store.read(SETTINGS)
    assert stored["tax_regime"] == "flat_rate"
    assert stored["quote_prefix"] == "EV"
