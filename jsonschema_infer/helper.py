import simplejson as json

import jsonpath_ng as jsonpath

import singer

from .formats import regex_detector
from .schema import SCHEMA_VERSIONS


LOGGER = singer.get_logger()


class SchemaInferError(Exception):
    pass


class MalformedSampleError(SchemaInferError, ValueError):
    """The raw input could not be decoded as JSON."""


class NoSamplesError(SchemaInferError):
    """A schema was requested before any sample was added."""


class UnsupportedRootTypeError(SchemaInferError, ValueError):
    """Only documents with "type": "object" at the root can be loaded."""


class MalformedTypeError(SchemaInferError, ValueError):
    """A "type" field is neither a string nor a list of strings."""


def parse_json(text):
    try:
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        return json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedSampleError("Failed to parse JSON: %s" % e) from e


def dump_json(obj, indent=""):
    """
    Serialize obj. An empty indent gives the compact form.
    """
    if indent:
        return json.dumps(obj, indent=indent, ensure_ascii=False)
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


def get_indent(indent):
    if indent is None:
        return ""
    if isinstance(indent, int):
        return " " * indent
    if indent.isdigit():
        # From the command line
        return " " * int(indent)
    return indent


def get_schema_version(version):
    """
    Accepts a version name such as draft-07 or the full $schema URL.
    """
    if not version:
        return SCHEMA_VERSIONS["draft-07"]
    if version in SCHEMA_VERSIONS:
        return SCHEMA_VERSIONS[version]
    if version in SCHEMA_VERSIONS.values():
        return version
    raise ValueError("Unknown schema version: %s. Use one of %s" %
                     (version, list(SCHEMA_VERSIONS.keys())))


def get_generator_options(config):
    """
    Translate the config dictionary into Generator keyword arguments.
    """
    custom_formats = [(name, regex_detector(pattern)) for name, pattern
                      in (config.get("custom_formats") or {}).items()]
    builtin_formats = config.get("builtin_formats")
    if builtin_formats is None:
        builtin_formats = True
    return {
        "predefined": dict(config.get("predefined") or {}),
        "max_samples": config.get("max_samples") or 0,
        "custom_formats": custom_formats,
        "builtin_formats": builtin_formats,
        "schema_version": get_schema_version(config.get("schema_version")),
        "examples": bool(config.get("examples")),
        "indent": get_indent(config.get("indent")),
    }


def _get_jsonpath(raw, path):
    jsonpath_expr = jsonpath.parse(path)
    return [match.value for match in jsonpath_expr.find(raw)]


def get_record_list(raw_data, record_list_level):
    """
    Dig the raw data to the level that contains the samples
    """
    if not record_list_level:
        return [raw_data]
    return _get_jsonpath(raw_data, record_list_level)


def read_samples(path, lines=False, record_list_level=None):
    """
    Read the samples from a file.

    - lines: Each non-blank line is a JSON document.
    - record_list_level: JSONPath to the samples inside each document.
      Every match is one sample.
    """
    with open(path, "r") as f:
        content = f.read()
    if lines:
        documents = [parse_json(line) for line in content.splitlines()
                     if line.strip()]
    else:
        documents = [parse_json(content)]
    samples = []
    for doc in documents:
        samples += get_record_list(doc, record_list_level)
    LOGGER.info("Read %d samples from %s", len(samples), path)
    return samples
