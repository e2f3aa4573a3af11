import logging
import os
import tempfile
import unittest

from tsp_engine.logging_config import setup_logging

NAME = "tsp_engine_logging_test"


class TestSetupLogging(unittest.TestCase):
    def tearDown(self):
        logger = logging.getLogger(NAME)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_reconfigure_closes_old_file_handler(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = os.path.join(tmp, "run.log")
            setup_logging(logging.INFO, log_file, names=(NAME,))
            old = [h for h in logging.getLogger(NAME).handlers if isinstance(h, logging.FileHandler)]
            self.assertEqual(len(old), 1)

            setup_logging(logging.INFO, log_file, names=(NAME,))
            handlers = logging.getLogger(NAME).handlers
            self.assertEqual(len(handlers), 2)
            self.assertNotIn(old[0], handlers)
            self.assertIsNone(old[0].stream)
            self.tearDown()

    def test_messages_reach_the_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = os.path.join(tmp, "run.log")
            setup_logging(logging.DEBUG, log_file, names=(NAME,))
            logging.getLogger(NAME).info("solved")
            self.tearDown()
            with open(log_file, encoding="utf-8") as f:
                self.assertIn("solved", f.read())


if __name__ == "__main__":
    unittest.main()
