import pytest

import activitymonitor.cli as cli
from tests.monitor_test_helpers import utc_days_ago


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, 'configure_logging', lambda _level: None)
    monkeypatch.delenv(cli.CONFIG_ENV, raising=False)
    monkeypatch.delenv(cli.LOG_LEVEL_ENV, raising=False)


def test_end_to_end_report_from_local_feeds(write_table, write_feed, capsys):
    stale = write_feed('stale.xml', utc_days_ago(10), utc_days_ago(20))
    fresh = write_feed('fresh.xml', utc_days_ago(1))
    empty = write_feed('empty.xml')
    table = write_table(
        [
            ('Acme', stale),
            ('Acme', fresh),
            ('Dr. McNinja', stale),
            ('Inactive Company Name', empty),
        ]
    )

    exit_code = cli.main([str(table), '5'])

    assert exit_code == 0
    assert capsys.readouterr().out == (
        'The following companies have been inactive for 5+ days:\n'
        '    dr. mcninja\n'
        '    inactive company name\n'
    )


def test_sequential_workers_flag_gives_same_report(write_table, write_feed, capsys):
    fresh = write_feed('fresh.xml', utc_days_ago(1))
    table = write_table([('Acme', fresh), ('Other', fresh.as_uri())])

    assert cli.main(['--workers', '1', str(table), '5']) == 0
    assert capsys.readouterr().out == 'No inactive companies found within 5 days.\n'


def test_validation_messages_exit_cleanly(tmp_path, capsys):
    assert cli.main([]) == 0
    assert capsys.readouterr().out.startswith('Usage: check-activity')

    assert cli.main([str(tmp_path / 'missing.csv'), '5']) == 0
    assert 'missing.csv' in capsys.readouterr().out


def test_negative_window_is_treated_as_a_value(write_table, capsys):
    table = write_table([('Acme', 'unused.xml')])

    assert cli.main([str(table), '-3']) == 0
    assert "Invalid day count '-3'" in capsys.readouterr().out


def test_unreadable_feed_exits_with_distinct_code(write_table, tmp_path, capsys):
    missing_feed = str(tmp_path / 'gone.xml')
    table = write_table([('Acme', missing_feed)])

    exit_code = cli.main([str(table), '5'])

    captured = capsys.readouterr()
    assert exit_code == 3
    assert captured.out == ''
    assert missing_feed in captured.err


def test_malformed_table_exits_with_distinct_code(write_table, capsys):
    table = write_table('"unterminated,feed.xml\n')

    exit_code = cli.main([str(table), '5'])

    captured = capsys.readouterr()
    assert exit_code == 2
    assert captured.out == ''
    assert 'Malformed row' in captured.err


def test_config_file_overrides_messages(write_table, write_feed, tmp_path, monkeypatch, capsys):
    config_path = tmp_path / 'monitor.yaml'
    config_path.write_text("messages:\n  no_results: 'All quiet-free for {days} days'\n", encoding='utf-8')
    monkeypatch.setenv(cli.CONFIG_ENV, str(config_path))
    table = write_table([('Acme', write_feed('fresh.xml', utc_days_ago(0)))])

    assert cli.main([str(table), '3']) == 0
    assert capsys.readouterr().out == 'All quiet-free for 3 days\n'


def test_dash_prefixed_window_reaches_day_count_validation(write_table, capsys):
    table = write_table([('Acme', 'unused.xml')])

    assert cli.main([str(table), '-x']) == 0
    assert "Invalid day count '-x'" in capsys.readouterr().out


@pytest.mark.parametrize('workers', ['abc', '0'])
def test_bad_workers_option_shows_help(write_table, capsys, workers):
    table = write_table([('Acme', 'unused.xml')])

    assert cli.main(['--workers', workers, str(table), '5']) == 0
    assert capsys.readouterr().out.startswith('Usage: check-activity')


def test_arguments_after_double_dash_are_positional(write_table, capsys):
    table = write_table([('Acme', 'unused.xml')])

    assert cli.main(['--', str(table), '--workers']) == 0
    assert "Invalid day count '--workers'" in capsys.readouterr().out


def test_undecodable_table_exits_as_malformed(tmp_path, capsys):
    table = tmp_path / 'latin1.csv'
    table.write_bytes(b'Caf\xe9,feed.xml\n')

    exit_code = cli.main([str(table), '5'])

    captured = capsys.readouterr()
    assert exit_code == 2
    assert captured.out == ''
    assert 'Malformed row' in captured.err
    assert 'line 1' in captured.err


def test_split_argv_keeps_unknown_dash_tokens_positional():
    options, positionals = cli.split_argv(['--workers', '2', 'table.csv', '-x', '--config=a.yaml', '--', '-h'])

    assert options == ['--workers', '2', '--config=a.yaml']
    assert positionals == ['table.csv', '-x', '-h']
