import pytest

from jsonschema_infer.formats import (
    BUILTIN_FORMATS, FormatDetector, FormatDetectorSet, always, is_date_time,
    is_email, is_ipv4, is_ipv6, is_uri, is_uuid, regex_detector)


def test_date_time():
    assert is_date_time("2024-01-01T00:00:00Z")
    assert is_date_time("2023-01-15T10:30:00.123456+09:00")
    assert is_date_time("2023-01-15T10:30:00-05:00")
    assert not is_date_time("2024-01-01")
    assert not is_date_time("2024-01-01 00:00:00Z")
    assert not is_date_time("2024-13-01T00:00:00Z")
    assert not is_date_time("2024-02-30T00:00:00Z")
    assert not is_date_time("not-a-date")


def test_email():
    assert is_email("john@example.com")
    assert is_email("john.doe+tag@mail.example.co")
    assert not is_email("john@")
    assert not is_email("john.example.com")
    assert not is_email("john@example")


def test_uuid():
    assert is_uuid("550e8400-e29b-41d4-a716-446655440000")
    assert is_uuid("550E8400-E29B-11D4-B716-446655440000")
    # version 6
    assert not is_uuid("550e8400-e29b-61d4-a716-446655440000")
    # variant
    assert not is_uuid("550e8400-e29b-41d4-c716-446655440000")
    assert not is_uuid("550e8400e29b41d4a716446655440000")


def test_ip_addresses():
    assert is_ipv6("2001:0db8:85a3:0000:0000:8a2e:0370:7334")
    assert is_ipv6("::1")
    assert not is_ipv6("192.168.1.1")
    assert not is_ipv6("fe80::1%eth0")

    assert is_ipv4("192.168.1.1")
    assert not is_ipv4("256.1.1.1")
    assert not is_ipv4("192.168.1")
    assert not is_ipv4("::1")

    # IPv4-mapped addresses written with a dotted quad are both
    assert is_ipv6("::ffff:192.168.1.1")
    assert is_ipv4("::ffff:192.168.1.1")


def test_uri():
    assert is_uri("https://example.com/path?q=1")
    assert is_uri("http://localhost:8080")
    assert is_uri("ftp://files.example.com/a.txt")
    assert not is_uri("mailto:john@example.com")
    assert not is_uri("http://")
    assert not is_uri("httpx://example.com")
    assert not is_uri("http://exa mple.com")
    assert not is_uri("example.com")


def test_builtin_order():
    detectors = FormatDetectorSet.build()
    assert detectors.names == ["date-time", "email", "uuid", "ipv6", "ipv4",
                               "uri"]
    assert len(detectors) == len(BUILTIN_FORMATS)


def test_custom_formats_come_last():
    hex_color = regex_detector("#[0-9a-fA-F]{6}")
    detectors = FormatDetectorSet.build(
        [("hex-color", hex_color), FormatDetector("even", lambda s: True)])
    assert detectors.names[-2:] == ["hex-color", "even"]
    assert list(detectors)[-2].detect("#FF5733")


def test_without_builtin_formats():
    detectors = FormatDetectorSet.build([("hex-color", lambda s: True)],
                                        builtin_formats=False)
    assert detectors.names == ["hex-color"]
    assert FormatDetectorSet.build(builtin_formats=False).names == []


def test_detector_must_be_callable():
    with pytest.raises(ValueError):
        FormatDetectorSet.build([("broken", "not a function")])


def test_regex_detector_matches_whole_string():
    detect = regex_detector("[a-z]+")
    assert detect("abc")
    assert not detect("abc1")
    assert not detect("")


def test_always():
    detector = always("custom")
    assert detector.name == "custom"
    assert detector.detect("anything")
