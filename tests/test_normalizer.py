"""Tests for converting transactions into the reporting currency."""

from decimal import Decimal

from conftest import FakeRateProvider, make_txn
from fx_recon.fx.client import RateClient
from fx_recon.fx.normalizer import CurrencyNormalizer


def make_normalizer(provider):
    return CurrencyNormalizer(RateClient(provider))


class TestConvert:
    def test_same_currency_is_identity(self, eur_usd_provider):
        txn = make_txn("-42.50", "Lunch")
        converted = make_normalizer(eur_usd_provider).convert(txn, "USD")

        assert converted.converted_amount == Decimal("-42.50")
        assert converted.conversion_rate == 1
        assert converted.transaction is txn
        assert eur_usd_provider.historical_calls == []

    def test_converts_with_rate(self, eur_usd_provider):
        txn = make_txn("100.00", "Hotel", txn_date="2024-01-02", currency="EUR")
        converted = make_normalizer(eur_usd_provider).convert(txn, "USD")

        assert converted.converted_amount == Decimal("110.00")
        assert converted.reporting_amount == Decimal("110.00")
        assert converted.amount == Decimal("100.00")
        assert converted.conversion_rate == 1.1
        assert converted.base_currency == "USD"
        assert converted.currency == "EUR"
        assert converted.is_converted

    def test_failed_rate_keeps_original_amount(self):
        provider = FakeRateProvider({}, latest_fails=True)
        txn = make_txn("75.00", "Train", currency="CHF")

        converted = make_normalizer(provider).convert(txn, "USD")

        assert converted.converted_amount == Decimal("75.00")
        assert converted.conversion_rate is None
        assert not converted.is_converted


class TestConvertBatch:
    def test_one_fetch_per_distinct_pair(self, eur_usd_provider):
        pairs = [("2024-01-02", "EUR"), ("2024-01-03", "EUR"), ("2024-01-02", "GBP"), ("2024-01-02", "USD")]
        transactions = [
            make_txn(i + 1, f"Item {i}", txn_date=pairs[i % 4][0], currency=pairs[i % 4][1])
            for i in range(100)
        ]
        progress = []

        converted = make_normalizer(eur_usd_provider).convert_batch(
            transactions, "USD", on_progress=lambda done, total: progress.append((done, total))
        )

        assert len(eur_usd_provider.historical_calls) == 3
        assert [c.transaction for c in converted] == transactions
        assert len(progress) == 100
        assert progress[-1] == (100, 100)
        assert converted[0].converted_amount == Decimal("1") * Decimal("1.1")

    def test_failed_pair_not_refetched(self):
        provider = FakeRateProvider({("EUR", "USD"): 1.1}, latest_fails=True)
        transactions = [
            make_txn(10, "A", currency="CHF"),
            make_txn(20, "B", currency="CHF"),
            make_txn(30, "C", currency="EUR"),
        ]

        converted = make_normalizer(provider).convert_batch(transactions, "USD")

        assert [c.conversion_rate for c in converted] == [None, None, 1.1]
        assert [c.converted_amount for c in converted][:2] == [Decimal("10"), Decimal("20")]
        chf_calls = [call for call in provider.historical_calls if call[1] == "CHF"]
        assert len(chf_calls) == 1

    def test_all_in_base_currency(self, eur_usd_provider):
        transactions = [make_txn(5, "A"), make_txn(6, "B")]
        converted = make_normalizer(eur_usd_provider).convert_batch(transactions, "USD")

        assert all(c.conversion_rate == 1 for c in converted)
        assert eur_usd_provider.historical_calls == []
