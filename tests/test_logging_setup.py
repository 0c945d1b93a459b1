#!/usr/bin/env python3
"""
Tests for console and file logging
"""

import io
import logging
import shutil
import tempfile
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from randobot.logging_setup import configure_logging


class TestConfigureLogging:
    """Test handlers installed on the package logger"""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.log_file = Path(self.temp_dir) / "nested" / "randobot.log"
        self.output = io.StringIO()

    def teardown_method(self):
        package_logger = logging.getLogger("randobot")
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
            handler.close()
        package_logger.setLevel(logging.NOTSET)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_writes_console_and_file(self):
        configure_logging("INFO", self.log_file, console=Console(file=self.output, width=200))

        logging.getLogger("randobot.crawl.crawler").info("Crawl started for https://hikes.test")

        assert "Crawl started" in self.output.getvalue()
        assert "INFO     randobot.crawl.crawler: Crawl started for https://hikes.test" in self.log_file.read_text(encoding="utf-8")

    def test_level_filters_package_records(self):
        configure_logging("warning", None, console=Console(file=self.output, width=200))

        logging.getLogger("randobot.qa").info("hidden")
        logging.getLogger("randobot.qa").warning("shown")

        assert "hidden" not in self.output.getvalue()
        assert "shown" in self.output.getvalue()

    def test_second_call_replaces_handlers(self):
        configure_logging("INFO", self.log_file)
        package_logger = configure_logging("DEBUG", None)

        assert package_logger.level == logging.DEBUG
        assert len(package_logger.handlers) == 1
        assert isinstance(package_logger.handlers[0], RichHandler)

    def test_unknown_level_falls_back_to_info(self):
        assert configure_logging("verbose", None).level == logging.INFO
