import ipaddress, re
from urllib.parse import urlsplit

import attr
from dateutil import parser as dateparser


# Email pattern (RFC 5322 simplified)
EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")
# UUID v1-v5 with the RFC 4122 variant
UUID_RE = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-5][0-9a-fA-F]{3}-"
                     r"[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}$")
# RFC 3339 shape. Calendar validity is left to dateutil.
DATE_TIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?"
                          r"(Z|[+-]\d{2}:\d{2})$")
URI_SCHEMES = ("http", "https", "ftp", "ftps")

DATE_TIME = "date-time"
EMAIL = "email"
UUID = "uuid"
IPV6 = "ipv6"
IPV4 = "ipv4"
URI = "uri"


@attr.s(frozen=True)
class FormatDetector(object):
    name = attr.ib()
    detect = attr.ib()


def is_date_time(value):
    # Shortest valid value is "2006-01-02T15:04:05Z"
    if len(value) < 20 or not DATE_TIME_RE.match(value):
        return False
    try:
        dateparser.isoparse(value)
    except (ValueError, OverflowError):
        return False
    return True


def is_email(value):
    if "@" not in value:
        return False
    return EMAIL_RE.match(value) is not None


def is_uuid(value):
    return len(value) == 36 and UUID_RE.match(value) is not None


def _ip_address(value):
    if "%" in value:
        return None
    try:
        return ipaddress.ip_address(value)
    except ValueError:
        return None


def is_ipv6(value):
    return _ip_address(value) is not None and ":" in value


def is_ipv4(value):
    ip = _ip_address(value)
    if ip is None or "." not in value:
        return False
    return ip.version == 4 or ip.ipv4_mapped is not None


def is_uri(value):
    if not value.startswith(("http", "ftp")):
        return False
    if any(c.isspace() for c in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in URI_SCHEMES and bool(parts.netloc)


BUILTIN_FORMATS = (
    FormatDetector(DATE_TIME, is_date_time),
    FormatDetector(EMAIL, is_email),
    FormatDetector(UUID, is_uuid),
    FormatDetector(IPV6, is_ipv6),
    FormatDetector(IPV4, is_ipv4),
    FormatDetector(URI, is_uri),
)


def regex_detector(pattern):
    """
    Make a detector from a regular expression. The whole string must match.
    """
    compiled = re.compile(pattern)

    def detect(value):
        return compiled.fullmatch(value) is not None

    return detect


def always(name):
    """
    A detector named `name` that accepts every string. Used when a format is
    restored from a loaded document and no real detector is known for it.
    """
    return FormatDetector(name, lambda value: True)


class FormatDetectorSet(object):
    """
    Ordered, read-only list of format detectors.

    Built-in detectors come first in a fixed order, then the custom ones in
    registration order. The order decides which format wins when several
    survive elimination: the earliest one.
    """
    def __init__(self, detectors=()):
        self._detectors = tuple(detectors)

    @classmethod
    def build(cls, custom_formats=None, builtin_formats=True):
        """
        - custom_formats: iterable of FormatDetector or (name, predicate) pairs
        - builtin_formats: When False, only the custom formats are used.
        """
        detectors = list(BUILTIN_FORMATS) if builtin_formats else []
        for entry in custom_formats or []:
            if not isinstance(entry, FormatDetector):
                name, detect = entry
                entry = FormatDetector(name, detect)
            if not callable(entry.detect):
                raise ValueError("Format detector for %s is not callable" %
                                 entry.name)
            detectors.append(entry)
        return cls(detectors)

    @property
    def names(self):
        return [d.name for d in self._detectors]

    def __iter__(self):
        return iter(self._detectors)

    def __len__(self):
        return len(self._detectors)

    def __repr__(self):
        return "FormatDetectorSet(%s)" % ", ".join(self.names)
