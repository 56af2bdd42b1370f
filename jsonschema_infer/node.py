import copy, math, numbers
from collections.abc import Mapping

import attr


NULL = "null"
BOOLEAN = "boolean"
INTEGER = "integer"
NUMBER = "number"
STRING = "string"
ARRAY = "array"
OBJECT = "object"

# Only these types participate in const tracking
CONST_TYPES = (STRING, INTEGER, NUMBER, BOOLEAN)

# const_state
CONST_UNSET = "unset"
CONST_CANDIDATE = "candidate"
CONST_DISQUALIFIED = "disqualified"


def get_primitive_type(value):
    """
    Classify a decoded JSON value into one of the JSON Schema primitive types.
    """
    if value is None:
        return NULL
    # bool is a subclass of int
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, int):
        return INTEGER
    if isinstance(value, numbers.Real):
        try:
            integral = value == math.trunc(value)
        except (OverflowError, ValueError):
            # inf, nan
            integral = False
        return INTEGER if integral else NUMBER
    if isinstance(value, str):
        return STRING
    if isinstance(value, (list, tuple)):
        return ARRAY
    if isinstance(value, Mapping):
        return OBJECT
    return STRING


@attr.s
class ObservationNode(object):
    """
    One structural position of the observed documents.

    Complex values are not stored: arrays merge all of their elements into the
    single `array_item` child and objects keep one child per key.
    """
    type_counts = attr.ib(factory=dict)
    sample_count = attr.ib(default=0)
    string_count = attr.ib(default=0)
    # None until the first string is observed
    candidate_formats = attr.ib(default=None)
    const_state = attr.ib(default=CONST_UNSET)
    const_type = attr.ib(default=None)
    const_value = attr.ib(default=None)
    example_value = attr.ib(default=None)
    array_item = attr.ib(default=None)
    object_properties = attr.ib(factory=dict)
    predefined_override = attr.ib(default=None)

    def observe(self, value, examples_enabled=False, detectors=()):
        """
        Merge one value seen at this position into the node.

        - detectors: FormatDetectorSet (or any iterable of FormatDetector).
          Only read when the first string arrives.
        """
        if examples_enabled and self.sample_count == 0:
            self.example_value = copy.deepcopy(value)

        self.sample_count += 1

        type_name = get_primitive_type(value)
        self.type_counts[type_name] = self.type_counts.get(type_name, 0) + 1

        if type_name in CONST_TYPES:
            self._track_const(type_name, value)

        if type_name == STRING:
            self.string_count += 1
            self._eliminate_formats(str(value), detectors)
        elif type_name == ARRAY:
            if self.array_item is None:
                self.array_item = ObservationNode()
            for item in value:
                self.array_item.observe(item, examples_enabled, detectors)
        elif type_name == OBJECT:
            for key, val in value.items():
                # Null values leave the child behind, making it optional
                if val is None:
                    continue
                child = self.object_properties.get(key)
                if child is None:
                    child = ObservationNode()
                    self.object_properties[key] = child
                child.observe(val, examples_enabled, detectors)

    def _track_const(self, type_name, value):
        if self.const_state == CONST_DISQUALIFIED:
            return
        if self.const_state == CONST_UNSET:
            self.const_state = CONST_CANDIDATE
            self.const_type = type_name
            self.const_value = value
        elif self.const_type != type_name or self.const_value != value:
            self.const_state = CONST_DISQUALIFIED
            self.const_type = None
            self.const_value = None

    def _eliminate_formats(self, value, detectors):
        if self.candidate_formats is None:
            self.candidate_formats = list(detectors)
        if self.candidate_formats:
            self.candidate_formats = [
                d for d in self.candidate_formats if d.detect(value)]

    @property
    def has_const(self):
        return self.const_state == CONST_CANDIDATE

    @property
    def format(self):
        """Name of the earliest surviving candidate format, if any."""
        if self.candidate_formats:
            return self.candidate_formats[0].name
        return None

    @property
    def primary_type(self):
        """
        The most frequently observed type. Ties go to the lexicographically
        smallest type name.
        """
        if not self.type_counts:
            return None
        return min(self.type_counts.items(), key=lambda kv: (-kv[1], kv[0]))[0]

    @property
    def observed_types(self):
        """Sorted list of the non-null types observed here."""
        return sorted(t for t in self.type_counts if t != NULL)

    @property
    def required(self):
        return sorted(key for key, child in self.object_properties.items()
                      if child.sample_count == self.sample_count)

    def iter_children(self):
        if self.array_item is not None:
            yield self.array_item
        for child in self.object_properties.values():
            yield child
