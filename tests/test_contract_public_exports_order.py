import unittest


class TestPublicExportsOrderContract(unittest.TestCase):
    def test_public_exports_are_sorted_and_unique(self):
        import rangepicker.api as api

        self.assertIsInstance(api._PUBLIC_EXPORTS, tuple)
        self.assertEqual(len(set(api._PUBLIC_EXPORTS)), len(api._PUBLIC_EXPORTS), "Duplicate in _PUBLIC_EXPORTS")
        self.assertEqual(list(api._PUBLIC_EXPORTS), sorted(api._PUBLIC_EXPORTS))

    def test_every_listed_export_is_defined(self):
        import rangepicker.api as api

        missing = [n for n in api._PUBLIC_EXPORTS if n not in api.__dict__]
        self.assertEqual(missing, [])
        self.assertEqual(api.__all__, list(api._PUBLIC_EXPORTS))


if __name__ == "__main__":
    raise SystemExit(unittest.main())
