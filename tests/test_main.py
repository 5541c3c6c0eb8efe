import logging
from unittest.mock import patch

from healthmon.main import build_parser, default_config_path, main


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.config == default_config_path()
    assert args.refresh_rate is None
    assert not args.no_color
    assert args.log_level == "INFO"


def test_main_applies_cli_overrides(tmp_path):
    log_file = tmp_path / "healthmon.log"
    with patch('healthmon.main.DisplayManager') as display_manager:
        main(["--refresh-rate", "7", "--no-color", "--log-file", str(log_file)])

    config = display_manager.call_args.args[0]
    assert config.refresh_rate == 7.0
    assert not config.display.show_colors
    display_manager.return_value.run.assert_called_once()
    assert "Starting healthmon" in log_file.read_text()

    logger = logging.getLogger("healthmon")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
