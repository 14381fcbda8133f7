from decimal import Decimal
from fractions import Fraction
import itertools
import pickle
import unittest

from bench_ProfilerPowerReporter.core.quantity import (
    PowerAmount,
    PowerAmountSeries,
    PowerAmountUnit as U,
    PowerSample,
    convert,
    decimal_mean,
    decimal_population_standard_deviation,
    mean,
    population_standard_deviation,
)


class ConversionTests(unittest.TestCase):
    def test_picowatt_hours_to_microwatt_hours(self):
        converted = PowerAmount(1000, U.PICOWATT_HOUR).convert(U.MICROWATT_HOUR)
        self.assertEqual(U.MICROWATT_HOUR, converted.unit)
        self.assertEqual(Decimal("0.001"), converted.amount)

    def test_joule_is_one_3600th_of_a_watt_hour(self):
        self.assertEqual(Decimal(3600), PowerAmount(1, U.WATT_HOUR).get_amount(U.JOULE))
        self.assertEqual(Fraction(1, 3600), convert(1, U.JOULE, U.WATT_HOUR))

    def test_round_trip_is_exact_for_every_unit_pair(self):
        magnitudes = ["0", "1", "0.001", "123456789.000000001", "7", "1e-9", "98765432109876543210"]
        for m, (u1, u2) in itertools.product(magnitudes, itertools.permutations(list(U), 2)):
            original = PowerAmount(Decimal(m), u1)
            back = original.convert(u2).convert(u1)
            self.assertEqual(original, back, f"{m} {u1.symbol} -> {u2.symbol} -> {u1.symbol}")

    def test_joule_round_trip_of_non_terminating_value(self):
        one_joule = PowerAmount(1, U.JOULE)
        in_pwh = one_joule.convert(U.PICOWATT_HOUR)
        self.assertEqual(Decimal(1), in_pwh.convert(U.JOULE).amount)

    def test_addition_converts_right_operand_into_left_unit(self):
        total = PowerAmount(1, U.MICROWATT_HOUR) + PowerAmount(500_000, U.PICOWATT_HOUR)
        self.assertEqual(U.MICROWATT_HOUR, total.unit)
        self.assertEqual(Decimal("1.5"), total.amount)

    def test_conversion_returns_new_value(self):
        original = PowerAmount(5, U.MILLIWATT_HOUR)
        original.convert(U.WATT_HOUR)
        self.assertEqual(Decimal(5), original.amount)
        self.assertEqual(U.MILLIWATT_HOUR, original.unit)

    def test_to_string_uses_symbol_and_decimals(self):
        self.assertEqual("1.50 μWh", PowerAmount("1.5", U.MICROWATT_HOUR).to_string(2))
        self.assertEqual("2 J", str(PowerAmount(2, U.JOULE)))

    def test_to_string_rounds_half_away_from_zero(self):
        self.assertEqual("0.13 μWh", PowerAmount("0.125", U.MICROWATT_HOUR).to_string(2))
        self.assertEqual("2.5 J", PowerAmount("2.45", U.JOULE).to_string(1))

    def test_amounts_survive_pickling(self):
        amount = PowerAmount(1, U.JOULE).convert(U.PICOWATT_HOUR)
        self.assertEqual(amount, pickle.loads(pickle.dumps(amount)))


class SeriesTests(unittest.TestCase):
    def test_series_conversion_keeps_sample_order(self):
        series = PowerAmountSeries(U.PICOWATT_HOUR, [
            PowerSample(Decimal("3.5"), 3000),
            PowerSample(Decimal("1.0"), 1000),
            PowerSample(Decimal("2.25"), 2000),
        ])
        converted = series.convert(U.MICROWATT_HOUR)
        self.assertEqual([Decimal("3.5"), Decimal("1.0"), Decimal("2.25")], [s.time for s in converted])
        self.assertEqual([Decimal("0.003"), Decimal("0.001"), Decimal("0.002")],
                         [s.power_amount for s in converted])
        self.assertEqual(series, converted.convert(U.PICOWATT_HOUR))

    def test_series_total(self):
        series = PowerAmountSeries(U.PICOWATT_HOUR, [PowerSample(1, 10), PowerSample(2, 32)])
        self.assertEqual(PowerAmount(42, U.PICOWATT_HOUR), series.total())
        self.assertEqual(PowerAmount(0, U.PICOWATT_HOUR), PowerAmountSeries().total())


class StatisticsTests(unittest.TestCase):
    def test_population_statistics(self):
        amounts = [PowerAmount(v, U.PICOWATT_HOUR) for v in (100, 200, 300)]
        self.assertEqual(Decimal(200), mean(amounts).amount)
        sd = population_standard_deviation(amounts)
        self.assertEqual(U.PICOWATT_HOUR, sd.unit)
        self.assertEqual(Decimal("81.65"), sd.amount.quantize(Decimal("0.01")))
        # population, not sample: the sample formula would give 100
        self.assertTrue(sd.amount.to_integral_value() != 100)

    def test_empty_input_has_no_value(self):
        self.assertIsNone(mean([]))
        self.assertIsNone(population_standard_deviation([]))
        self.assertIsNone(decimal_mean([]))
        self.assertIsNone(decimal_population_standard_deviation([]))

    def test_zero_measurements_are_not_missing(self):
        zeros = [PowerAmount(0, U.PICOWATT_HOUR)] * 2
        self.assertEqual(Decimal(0), mean(zeros).amount)
        self.assertEqual(Decimal(0), population_standard_deviation(zeros).amount)

    def test_statistics_use_unit_of_first_element(self):
        amounts = [PowerAmount(1, U.MICROWATT_HOUR), PowerAmount(3_000_000, U.PICOWATT_HOUR)]
        avg = mean(amounts)
        sd = population_standard_deviation(amounts)
        self.assertEqual(U.MICROWATT_HOUR, avg.unit)
        self.assertEqual(Decimal(2), avg.amount)
        self.assertEqual(U.MICROWATT_HOUR, sd.unit)
        self.assertEqual(Decimal(1), sd.amount)

    def test_decimal_statistics(self):
        values = [Decimal(1000), Decimal(2000), Decimal(4000)]
        self.assertEqual(Decimal("2333.333"), decimal_mean(values).quantize(Decimal("0.001")))
        self.assertEqual(Decimal("1247.219"),
                         decimal_population_standard_deviation(values).quantize(Decimal("0.001")))


if __name__ == "__main__":
    unittest.main()
