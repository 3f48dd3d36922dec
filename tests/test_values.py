import pytest

from webserv.errors import DirectiveError, ValueConversionError
from webserv.values import (
    check_path,
    int_to_ipv4,
    parse_bytes,
    parse_ip,
    parse_port,
    parse_return_code,
    parse_size_t,
    parse_status_code,
    parse_switch,
    parse_time,
    split_number_unit,
)


def test_check_path_accepts_plain_path():
    assert check_path("/var/www/html") == "/var/www/html"


def test_check_path_rejects_variable():
    with pytest.raises(ValueConversionError):
        check_path("/var/$root/html")


def test_parse_size_t_accepts_digits():
    assert parse_size_t("42") == 42
    assert parse_size_t("9223372036854775807") == int("9223372036854775807")


@pytest.mark.parametrize("text", ["", "-1", "12a", " 1", "9223372036854775808"])
def test_parse_size_t_rejects(text):
    with pytest.raises(ValueConversionError):
        parse_size_t(text)


def test_parse_status_code_range():
    assert parse_status_code("404") == 404
    assert parse_status_code("300") == 300
    for bad in ("299", "600"):
        with pytest.raises(ValueConversionError):
            parse_status_code(bad)


@pytest.mark.parametrize("code", ["301", "302", "303", "307", "308"])
def test_parse_return_code_accepts_redirects(code):
    assert parse_return_code(code) == int(code)


def test_parse_return_code_rejects_other_codes():
    with pytest.raises(DirectiveError):
        parse_return_code("200")


def test_int_to_ipv4():
    assert int_to_ipv4(0x7F000001) == "127.0.0.1"
    assert int_to_ipv4(0) == "0.0.0.0"


def test_parse_ip_dotted_and_numeric():
    assert parse_ip("127.0.0.1") == "127.0.0.1"
    assert parse_ip("2130706433") == "127.0.0.1"


def test_parse_ip_short_form_is_padded():
    assert parse_ip("127.1") == "0.0.127.1"


@pytest.mark.parametrize("text", ["256.1.1.1", "1.2.3.4.5", "1..2", "255.255.255.255", "a.b"])
def test_parse_ip_rejects(text):
    with pytest.raises(ValueConversionError):
        parse_ip(text)


def test_parse_port():
    assert parse_port("8080") == 8080
    assert parse_port("0") == 0
    with pytest.raises(ValueConversionError):
        parse_port("65536")


def test_split_number_unit():
    assert split_number_unit("10ms") == (10, "ms")
    assert split_number_unit("5") == (5, "")
    with pytest.raises(ValueConversionError):
        split_number_unit("ms")


def test_parse_time_units_relate():
    assert parse_time("5ms") == parse_time("5") == 5
    assert parse_time("1s") == parse_time("1000")
    assert parse_time("1m") == 60 * parse_time("1s")
    assert parse_time("1h") == 60 * parse_time("1m")


@pytest.mark.parametrize("text", ["1d", "2562047789h", "9223372036855s", "x"])
def test_parse_time_rejects(text):
    with pytest.raises(ValueConversionError):
        parse_time(text)


def test_parse_bytes_units_relate():
    assert parse_bytes("100") == 100
    assert parse_bytes("1k") == 1024
    assert parse_bytes("1K") == parse_bytes("1k")
    assert parse_bytes("1m") == 1024 * parse_bytes("1k")
    assert parse_bytes("1G") == 1024 * parse_bytes("1M")


@pytest.mark.parametrize("text", ["1kb", "1x", "8589934592g", "k"])
def test_parse_bytes_rejects(text):
    with pytest.raises(ValueConversionError):
        parse_bytes(text)


def test_parse_switch():
    assert parse_switch("ON") is True
    assert parse_switch("off") is False
    with pytest.raises(ValueConversionError):
        parse_switch("yes")