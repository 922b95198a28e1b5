import time

from xsqz.timing import format_elapsed_time, print_elapsed_time


def test_format_known_span():
    assert format_elapsed_time(0, 1_500_000_000) == "Time elapsed = 1[s] 1500[ms] 1500000[us] "


def test_format_truncates_sub_microsecond():
    text = format_elapsed_time(100, 100 + 999)
    assert text == "Time elapsed = 0[s] 0[ms] 0[us] "


def test_format_depends_only_on_difference():
    assert format_elapsed_time(5_000, 2_005_000) == format_elapsed_time(0, 2_000_000)


def test_format_with_real_clock_is_non_negative():
    begin = time.monotonic_ns()
    end = time.monotonic_ns()
    text = format_elapsed_time(begin, end)
    assert text.startswith("Time elapsed = 0[s] ")
    assert "-" not in text


def test_print_writes_to_stderr(capsys):
    print_elapsed_time(0, 2_000_000_000)
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == format_elapsed_time(0, 2_000_000_000) + "\n"