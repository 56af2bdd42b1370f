import copy, threading
from collections.abc import Mapping

import singer

from .formats import FormatDetectorSet, always
from .helper import (MalformedTypeError, NoSamplesError,
                     UnsupportedRootTypeError, dump_json, get_indent,
                     parse_json)
from .node import (CONST_CANDIDATE, CONST_TYPES, NULL, OBJECT, STRING,
                   ObservationNode, get_primitive_type)
from .schema import DRAFT_07, PREDEFINED_TYPES, Schema, assemble


LOGGER = singer.get_logger()


class Generator(object):
    """
    Infers a JSON schema from the samples added to it.

    All public methods hold a single lock, so one Generator can be shared
    between threads.
    """
    def __init__(self,
                 predefined=None,
                 max_samples=0,
                 custom_formats=None,
                 builtin_formats=True,
                 schema_version=DRAFT_07,
                 examples=False,
                 indent=""):
        """
        - predefined: field name -> predefined type. Top-level fields with
          these names skip inference.
        - max_samples: Samples after this many are ignored. 0 is unlimited.
        - custom_formats: (name, predicate) pairs checked after the built-in
          formats.
        - builtin_formats: When False, only custom_formats are detected.
        - schema_version: $schema URL of the generated document
        - examples: Record the first value seen at each position as example.
        - indent: Indentation string (or number of spaces). Empty is compact.
        """
        predefined = dict(predefined or {})
        for name, type_name in predefined.items():
            if type_name not in PREDEFINED_TYPES:
                raise ValueError("Unknown predefined type %s for %s" %
                                 (type_name, name))
        if max_samples is None:
            max_samples = 0
        if max_samples < 0:
            raise ValueError("max_samples must be 0 or larger")

        self._lock = threading.Lock()
        self._root = ObservationNode()
        self._schema = None
        self._sample_count = 0
        self._max_samples = max_samples
        self._predefined = predefined
        self._formats = FormatDetectorSet.build(custom_formats,
                                                builtin_formats)
        self._schema_version = schema_version
        self._examples = examples
        self._indent = get_indent(indent)

    @property
    def sample_count(self):
        return self._sample_count

    def add_sample(self, json_data):
        """
        Parse a JSON text and add it as a sample.
        """
        data = parse_json(json_data)
        self.add_parsed_sample(data)

    def add_parsed_sample(self, data):
        """
        Add an already decoded JSON value as a sample.
        """
        with self._lock:
            if self._max_samples and self._sample_count >= self._max_samples:
                LOGGER.debug("Max samples %d reached. Skipping the sample.",
                             self._max_samples)
                return

            self._sample_count += 1
            self._root.observe(data, self._examples, self._formats)
            self._apply_predefined_types()
            # Rebuilt on the next read
            self._schema = None

            LOGGER.debug("Added sample %d", self._sample_count)
            if self._max_samples and self._sample_count == self._max_samples:
                LOGGER.info("Max samples %d reached. Further samples will "
                            "be ignored.", self._max_samples)

    def _apply_predefined_types(self):
        for name, type_name in self._predefined.items():
            node = self._root.object_properties.get(name)
            if node is not None:
                node.predefined_override = type_name

    def _current_schema(self):
        if self._sample_count == 0:
            raise NoSamplesError("No samples added")
        if self._schema is None:
            self._schema = assemble(self._root, self._schema_version)
        return self._schema

    def get_current_schema(self):
        """
        Returns the schema as a Schema object. Treat it as read-only: it is
        also the cached copy.
        """
        with self._lock:
            return self._current_schema()

    def generate(self):
        """
        Returns the schema as JSON text.
        """
        with self._lock:
            return dump_json(self._current_schema().to_dict(), self._indent)

    def generate_to(self, fp):
        """
        Write the schema as JSON text to a file-like object.
        """
        with self._lock:
            fp.write(dump_json(self._current_schema().to_dict(),
                               self._indent))
            fp.write("\n")

    def load(self, document):
        """
        Load a previously generated schema so that samples can be added on
        top of it.

        The original sample counts cannot be recovered from a schema, so the
        root counts as one sample: required properties get their parent's
        count and the others one less (at least 1).
        Sub-schemas without a type (items of arrays that were always empty)
        load as positions that have not seen a value yet.

        - document: JSON text, a dict, or a Schema
        """
        if isinstance(document, Schema):
            document = document.to_dict()
        elif isinstance(document, (str, bytes)):
            document = parse_json(document)

        if not isinstance(document, Mapping) or document.get("type") != OBJECT:
            root_type = (document.get("type")
                         if isinstance(document, Mapping) else None)
            raise UnsupportedRootTypeError(
                "Only object schemas can be loaded, got: %s" % (root_type,))

        # Build everything before touching the current state
        root = _load_node(document, 1)
        schema = Schema.from_dict(document)

        with self._lock:
            self._root = root
            self._sample_count = 1
            self._schema = schema
        LOGGER.info("Loaded schema with %d properties",
                    len(root.object_properties))


def _get_types(document):
    if not isinstance(document, Mapping):
        raise MalformedTypeError("Expected a schema object, got: %s" %
                                 type(document).__name__)
    type_field = document.get("type")
    if type_field is None:
        # Positions that never saw a value, e.g. items of empty arrays
        return []
    if isinstance(type_field, str):
        return [type_field]
    if (isinstance(type_field, list) and
            all(isinstance(t, str) for t in type_field)):
        types = [t for t in type_field if t != NULL]
        return types or [NULL]
    raise MalformedTypeError("Unsupported type format: %r" % (type_field,))


def _load_node(document, sample_count):
    types = _get_types(document)
    node = ObservationNode(sample_count=sample_count)
    for type_name in types:
        node.type_counts[type_name] = sample_count

    items = document.get("items")
    if items is not None:
        # Array items inherit the parent's count
        node.array_item = _load_node(items, sample_count)

    properties = document.get("properties")
    if properties is not None:
        if not isinstance(properties, Mapping):
            raise MalformedTypeError("properties must be an object")
        required = document.get("required")
        required = (set(r for r in required if isinstance(r, str))
                    if isinstance(required, list) else set())
        for key, prop in properties.items():
            if key in required:
                child_count = sample_count
            else:
                child_count = max(1, sample_count - 1)
            node.object_properties[key] = _load_node(prop, child_count)

    # A loaded format accepts every string
    fmt = document.get("format")
    if STRING in types and fmt:
        node.candidate_formats = [always(fmt)]
        node.string_count = sample_count

    const = document.get("const")
    if const is not None:
        const_type = get_primitive_type(const)
        if const_type in CONST_TYPES:
            node.const_state = CONST_CANDIDATE
            node.const_type = const_type
            node.const_value = const

    example = document.get("example")
    if example is not None:
        node.example_value = copy.deepcopy(example)

    return node
