import json
import os
import tempfile
import unittest

from mareelog.settings import (
    ChartSettings,
    DEFAULT_SETTINGS,
    SensorConfig,
    load_settings,
    settings_from_dict,
    save_settings,
    settings_to_dict,
)


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        settings = ChartSettings()
        self.assertEqual(settings.points_per_page, 1440)
        self.assertEqual(settings.display_step, 1)
        self.assertEqual(len(settings.sensors), 12)
        self.assertEqual([s.id for s in settings.sensors], list(range(1, 13)))
        self.assertTrue(all(s.enabled for s in settings.sensors))

    def test_effective_page_size(self):
        self.assertEqual(ChartSettings(points_per_page=60, display_step=5).effective_page_size, 300)

    def test_camel_case_keys(self):
        settings = settings_from_dict({
            "pointsPerPage": 120,
            "displayStep": 2,
            "tempMin": -25,
            "sensors": [{"id": 3, "label": "Vivier", "color": "#123456", "min": -2, "max": None}],
        })
        self.assertEqual(settings.points_per_page, 120)
        self.assertEqual(settings.display_step, 2)
        self.assertEqual(settings.temp_min, -25.0)
        self.assertEqual(settings.temp_max, 50.0)
        self.assertEqual(settings.sensors, (SensorConfig(id=3, label="Vivier", color="#123456", min=-2.0),))

    def test_snake_case_wins_in_order(self):
        settings = settings_from_dict({"points_per_page": 10, "pointsPerPage": 20})
        self.assertEqual(settings.points_per_page, 10)

    def test_invalid_values(self):
        for data in ({"pointsPerPage": "many"}, {"sensors": [{"label": "no id"}]},
                     {"sensors": 5}, {"displayStep": 0}):
            with self.subTest(data=data), self.assertRaises(ValueError):
                settings_from_dict(data)

    def test_dict_round_trip(self):
        settings = ChartSettings(points_per_page=90, sensors=(SensorConfig(id=2, enabled=False, max=8.0),))
        self.assertEqual(settings_from_dict(json.loads(json.dumps(settings_to_dict(settings)))), settings)


class LoadSettingsTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "chart_settings.json")

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file(self):
        self.assertEqual(load_settings(self.path), DEFAULT_SETTINGS)

    def test_valid_file(self):
        with open(self.path, "w", encoding="utf-8") as file:
            json.dump({"pointsPerPage": 30}, file)
        self.assertEqual(load_settings(self.path).points_per_page, 30)

    def test_save_then_load(self):
        settings = ChartSettings(display_step=5, sensors=(SensorConfig(id=1, label="Cale", min=-18.0),))
        target = os.path.join(self.tmp.name, "sub", "chart_settings.json")
        self.assertEqual(str(save_settings(settings, target)), target)
        self.assertEqual(load_settings(target), settings)

    def test_invalid_json_falls_back(self):
        with open(self.path, "w", encoding="utf-8") as file:
            file.write("{not json")
        with self.assertLogs("mareelog.settings", level="ERROR"):
            self.assertEqual(load_settings(self.path), DEFAULT_SETTINGS)


if __name__ == "__main__":
    unittest.main()
