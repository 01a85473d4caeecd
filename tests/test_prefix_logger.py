import io

from automqtt.prefix_logger import PrefixLogger


def test_println_joins_arguments():
    stream = io.StringIO()
    PrefixLogger("publish", stream).println("queue", "got", 3)
    assert stream.getvalue() == "publish: queue got 3\n"


def test_printf_adds_missing_newline():
    stream = io.StringIO()
    logger = PrefixLogger("sub", stream)
    logger.printf("error: %s", "oops")
    assert stream.getvalue() == "sub:error: oops\n"


def test_printf_keeps_existing_newline():
    stream = io.StringIO()
    logger = PrefixLogger("p", stream)
    logger.printf("count %d\n", 7)
    logger.printf("again\n")
    lines = stream.getvalue().splitlines(keepends=True)
    assert lines == ["p:count 7\n", "p:again\n"]


def test_printf_without_args_leaves_percent_alone():
    stream = io.StringIO()
    PrefixLogger("x", stream).printf("100%")
    assert stream.getvalue().endswith("100%\n")
    assert stream.getvalue().startswith("x:")


def test_default_stream_is_stdout(capsys):
    PrefixLogger("std").printf("hello %s", "there")
    out = capsys.readouterr().out
    assert out.startswith("std:")
    assert "there" in out
    assert out.count("\n") == 1