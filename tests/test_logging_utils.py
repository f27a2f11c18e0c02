import argparse
import logging
import unittest

from yolox_kit.logging_utils import add_logging_args, resolve_log_level


class TestLoggingUtils(unittest.TestCase):
    def test_resolve_log_level(self) -> None:
        self.assertEqual(resolve_log_level(), logging.INFO)
        self.assertEqual(resolve_log_level(verbose=1), logging.DEBUG)
        self.assertEqual(resolve_log_level(quiet=1), logging.WARNING)
        self.assertEqual(resolve_log_level(quiet=3), logging.ERROR)
        self.assertEqual(resolve_log_level("DEBUG", quiet=2), logging.DEBUG)

    def test_add_logging_args(self) -> None:
        parser = argparse.ArgumentParser()
        add_logging_args(parser)
        args = parser.parse_args(["-vv", "--log-level", "warning"])
        self.assertEqual(args.verbose, 2)
        self.assertEqual(args.log_level, "warning")


if __name__ == "__main__":
    unittest.main()
