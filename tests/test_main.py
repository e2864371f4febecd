"""Tests for main entry point."""

from argparse import Namespace
from unittest.mock import patch, MagicMock

from queuecast.main import main


class TestMain:
    """Test the main entry point function."""

    @patch('queuecast.main.Application')
    @patch('queuecast.main.CLIConfigManager')
    @patch('queuecast.main.setup_logging')
    @patch('queuecast.main.get_logger')
    def test_main_successful_execution(self, mock_get_logger, mock_setup_logging,
                                       mock_cli_manager_class, mock_app_class):
        """Test successful execution of main function."""
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger

        mock_cli_manager = MagicMock()
        mock_args = Namespace(log_level='INFO', log_format='standard', command='list')
        mock_cli_manager.parse_args.return_value = mock_args
        mock_cli_manager_class.return_value = mock_cli_manager

        mock_app = MagicMock()
        mock_app.run.return_value = 0
        mock_app_class.return_value = mock_app

        result = main()

        assert result == 0
        mock_cli_manager.parse_args.assert_called_once()
        mock_setup_logging.assert_called_once_with(level='INFO', format_type='standard')
        mock_get_logger.assert_called_with('queuecast.main')
        mock_logger.debug.assert_called_with("Starting queuecast")
        mock_app.run.assert_called_once_with(mock_args)

    @patch('queuecast.main.Application')
    @patch('queuecast.main.CLIConfigManager')
    @patch('queuecast.main.setup_logging')
    @patch('queuecast.main.get_logger')
    def test_main_defaults_when_logging_options_absent(self, mock_get_logger, mock_setup_logging,
                                                       mock_cli_manager_class, mock_app_class):
        """Unset --log-level and --log-format fall back to INFO and standard."""
        mock_cli_manager_class.return_value.parse_args.return_value = Namespace(
            log_level=None, log_format=None, command='update'
        )
        mock_app_class.return_value.run.return_value = 0

        assert main() == 0
        mock_setup_logging.assert_called_once_with(level='INFO', format_type='standard')

    @patch('queuecast.main.Application')
    @patch('queuecast.main.CLIConfigManager')
    @patch('queuecast.main.setup_logging')
    @patch('queuecast.main.get_logger')
    def test_main_application_returns_error_code(self, mock_get_logger, mock_setup_logging,
                                                 mock_cli_manager_class, mock_app_class):
        """Test main function when application returns non-zero exit code."""
        mock_args = Namespace(log_level='DEBUG', log_format='json', command='update')
        mock_cli_manager_class.return_value.parse_args.return_value = mock_args
        mock_app_class.return_value.run.return_value = 1

        result = main()

        assert result == 1
        mock_setup_logging.assert_called_once_with(level='DEBUG', format_type='json')

    @patch('queuecast.main.CLIConfigManager')
    @patch('queuecast.main.setup_logging')
    @patch('queuecast.main.get_logger')
    def test_main_keyboard_interrupt(self, mock_get_logger, mock_setup_logging,
                                     mock_cli_manager_class):
        """Test main function handles KeyboardInterrupt."""
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger
        mock_cli_manager_class.return_value.parse_args.side_effect = KeyboardInterrupt()

        result = main()

        assert result == 130
        mock_logger.info.assert_called_with("Interrupted by user")

    @patch('queuecast.main.Application')
    @patch('queuecast.main.CLIConfigManager')
    @patch('queuecast.main.setup_logging')
    @patch('queuecast.main.get_logger')
    def test_main_unexpected_exception(self, mock_get_logger, mock_setup_logging,
                                       mock_cli_manager_class, mock_app_class):
        """Test main function handles unexpected exceptions."""
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger
        mock_app_class.return_value.run.side_effect = RuntimeError("Test error")
        mock_cli_manager_class.return_value.parse_args.return_value = Namespace(
            log_level='INFO', log_format='standard', command='list'
        )

        result = main()

        assert result == 1
        mock_logger.error.assert_called_with("Unexpected error: Test error")

    @patch('queuecast.main.logging.getLogger')
    @patch('queuecast.main.CLIConfigManager')
    @patch('queuecast.main.setup_logging')
    @patch('queuecast.main.get_logger')
    def test_main_exception_with_no_logging_handlers(self, mock_get_logger, mock_setup_logging,
                                                     mock_cli_manager_class, mock_root_logger):
        """Logging is set up with defaults when the failure happened before it was configured."""
        mock_root_logger.return_value.handlers = []
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger
        mock_cli_manager_class.return_value.parse_args.side_effect = ValueError("Config error")

        result = main()

        assert result == 1
        mock_setup_logging.assert_called_once_with()
        mock_logger.error.assert_called_with("Unexpected error: Config error")

    @patch('queuecast.main.Application')
    @patch('queuecast.main.CLIConfigManager')
    @patch('queuecast.main.setup_logging')
    @patch('queuecast.main.get_logger')
    def test_main_passes_each_command_to_application(self, mock_get_logger, mock_setup_logging,
                                                     mock_cli_manager_class, mock_app_class):
        """Test main function passes different commands to application."""
        for command, expected_code in [('add', 0), ('list', 0), ('update', 1), ('skip', 1)]:
            mock_app_class.reset_mock()

            mock_args = Namespace(log_level='INFO', log_format='standard', command=command)
            mock_cli_manager_class.return_value.parse_args.return_value = mock_args
            mock_app = MagicMock()
            mock_app.run.return_value = expected_code
            mock_app_class.return_value = mock_app

            assert main() == expected_code
            mock_app.run.assert_called_once_with(mock_args)
