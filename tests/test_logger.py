import io

from framebus.logger import LogLevel, Logger


def _plain(level=LogLevel.NORMAL):
    buffer = io.StringIO()
    return Logger(level=level, color=False, stream=buffer), buffer


def test_info_line_has_tx_and_tag_prefix():
    logger, buffer = _plain()
    logger.info("RX", "hello\n")
    assert buffer.getvalue() == "[TX 0000] [RX] hello\n"


def test_empty_tag_writes_message_only():
    logger, buffer = _plain()
    logger.error("", "bare\n")
    assert buffer.getvalue() == "bare\n"


def test_verbose_suppressed_at_normal_level():
    logger, buffer = _plain()
    logger.verbose("BUS", "detail\n")
    assert buffer.getvalue() == ""


def test_verbose_shown_at_verbose_level():
    logger, buffer = _plain(LogLevel.VERBOSE)
    logger.verbose("BUS", "detail\n")
    assert buffer.getvalue().endswith("[BUS] detail\n")


def test_quiet_suppresses_info_and_error():
    logger, buffer = _plain(LogLevel.QUIET)
    logger.info("A", "x")
    logger.error("B", "y")
    assert buffer.getvalue() == ""


def test_banner_begin_sets_txid():
    logger, buffer = _plain()
    logger.banner_tx_begin(7, 3)
    logger.info("MASTER", "go\n")
    lines = buffer.getvalue().splitlines()
    assert lines[0] == "┌─ TX 0007: MASTER → DEV 03"
    assert lines[1].startswith("[TX 0007] [MASTER]")
    assert logger.txid == 7


def test_banner_end_reports_result():
    logger, buffer = _plain()
    logger.banner_tx_end(1, True)
    logger.banner_tx_end(1, False)
    assert buffer.getvalue() == "└─ RESULT: ACK ✓\n└─ RESULT: NACK ✗\n"


def test_banners_ignore_level():
    logger, buffer = _plain(LogLevel.QUIET)
    logger.banner_tx_end(2, True)
    assert "ACK" in buffer.getvalue()


def test_draw_rule_plain():
    logger, buffer = _plain()
    logger.draw_rule()
    text = buffer.getvalue()
    assert text.endswith("\n")
    assert set(text.strip()) == {"─"}


def test_color_codes_wrap_output():
    buffer = io.StringIO()
    logger = Logger(color=True, stream=buffer)
    logger.info("RX", "msg")
    text = buffer.getvalue()
    assert text.startswith("\x1b[2m[TX 0000]\x1b[0m")
    assert "\x1b[36m[RX]\x1b[0m" in text
    assert text.endswith("msg")


def test_colored_banner_end():
    buffer = io.StringIO()
    logger = Logger(color=True, stream=buffer)
    logger.banner_tx_end(0, False)
    assert buffer.getvalue() == "\x1b[31m└─ RESULT: NACK ✗\n\x1b[0m"


def test_default_stream_is_stdout(capsys):
    logger = Logger(color=False)
    logger.info("T", "out\n")
    assert capsys.readouterr().out == "[TX 0000] [T] out\n"