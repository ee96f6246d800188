"""
Tests for configuration loading and the command line entrypoint
"""

import json
import logging
from unittest.mock import patch

import pytest

from vision_scan import app
from vision_scan.scanner.normalization import normalize_domain
from vision_scan.util.env import load_config
from vision_scan.util.log import setup_logging
from vision_scan.util.types import DEFAULT_USER_AGENT, ScanReport

ENV_VARS = ['DOMAIN', 'PORT_TIMEOUT', 'TLS_TIMEOUT', 'DNS_TIMEOUT', 'HTTP_TIMEOUT', 'USER_AGENT']


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path / '.env'


class TestLoadConfig:
    """Test suite for load_config"""

    def test_defaults_without_env_file(self, clean_env):
        config = load_config(clean_env)
        assert config.domain is None
        assert config.port_timeout == 2.5
        assert config.tls_timeout == 4.0
        assert config.user_agent == DEFAULT_USER_AGENT

    def test_reads_env_file(self, clean_env, monkeypatch):
        clean_env.write_text('DOMAIN=example.com\nPORT_TIMEOUT=1.5\nHTTP_TIMEOUT=20\n')
        config = load_config(clean_env)
        assert config.domain == 'example.com'
        assert config.port_timeout == 1.5
        assert config.http_timeout == 20.0
        for name in ENV_VARS:
            monkeypatch.delenv(name, raising=False)

    def test_bad_timeout_fails_early(self, clean_env, monkeypatch):
        monkeypatch.setenv('TLS_TIMEOUT', 'soon')
        with pytest.raises(ValueError):
            load_config(clean_env)

    def test_negative_timeout_fails_early(self, clean_env, monkeypatch):
        monkeypatch.setenv('DNS_TIMEOUT', '-1')
        with pytest.raises(ValueError):
            load_config(clean_env)


class TestMain:
    """Test suite for the CLI"""

    REPORT = ScanReport(
        score=50,
        issues=('Missing DMARC Record (Email Spoofing Possible)', 'Missing HSTS Header (Vulnerable to Downgrade Attacks)'),
        passes=('SPF Record Detected (Email Identity)',),
        cms='wordpress',
    )

    def test_invalid_domain_exit_code(self, clean_env):
        with patch.object(app, 'setup_logging'), \
                patch.object(app, 'load_config', return_value=load_config(clean_env)), \
                patch.object(app, 'scan_domain') as scan:
            assert app.main(['https://', '--log-level', 'ERROR']) == app.EXIT_INVALID_DOMAIN
        scan.assert_not_called()

    def test_prints_report_with_advice(self, clean_env, capsys, tmp_path):
        out_file = tmp_path / 'reports' / 'example.json'
        with patch.object(app, 'setup_logging'), \
                patch.object(app, 'load_config', return_value=load_config(clean_env)), \
                patch.object(app, 'scan_domain', return_value=self.REPORT) as scan:
            code = app.main(['https://www.Example.com/', '--industry', 'finance', '--employees', '5',
                             '--output', str(out_file), '--log-level', 'ERROR'])

        assert code == app.EXIT_OK
        assert scan.call_args.args[0] == 'https://www.Example.com/'

        printed = json.loads(capsys.readouterr().out)
        assert printed['score'] == 50
        assert printed['domain'] == 'example.com'
        assert printed['estimated_loss'] == 5600
        assert [fix['title'] for fix in printed['dns_fixes']] == ['DMARC Implementation Guide']
        assert 'WordPress' in printed['advisory']

        assert json.loads(out_file.read_text()) == printed

    def test_domain_label_matches_scanned_domain(self, clean_env, capsys):
        report = ScanReport(score=70, issues=('Missing DMARC Record (Email Spoofing Possible)',))
        with patch.object(app, 'setup_logging'), \
                patch.object(app, 'load_config', return_value=load_config(clean_env)), \
                patch.object(app, 'scan_domain', return_value=report) as scan:
            assert app.main(['www.www.example.com', '--log-level', 'ERROR']) == app.EXIT_OK

        raw = scan.call_args.args[0]
        assert raw == 'www.www.example.com'
        assert normalize_domain(raw) == 'www.example.com'

        printed = json.loads(capsys.readouterr().out)
        assert printed['domain'] == 'www.example.com'
        assert 'admin@www.example.com' in printed['dns_fixes'][0]['code']

    def test_build_output_without_industry(self):
        output = app.build_output('example.com', ScanReport(score=100), None, 5)
        assert 'estimated_loss' not in output
        assert output['dns_fixes'] == []
        assert output['cms'] is None


class TestSetupLogging:
    """Test suite for setup_logging"""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_console_goes_to_stderr_not_stdout(self, capsys):
        setup_logging(level=logging.INFO)
        logging.getLogger('vision_scan.test').info('scan started')

        captured = capsys.readouterr()
        assert 'scan started' in captured.err
        assert captured.out == ''

    def test_file_handler_when_requested(self, tmp_path):
        log_file = tmp_path / 'logs' / 'scan.log'
        setup_logging(log_file=log_file, level=logging.INFO)
        logging.getLogger('vision_scan.test').info('written to file')

        for handler in logging.getLogger().handlers:
            handler.flush()
        assert 'written to file' in log_file.read_text()
