#!/usr/bin/env python3
import argparse, os, sys
import singer
from singer import utils

from .formats import FormatDetector, FormatDetectorSet
from .generator import Generator
from .helper import (MalformedSampleError, MalformedTypeError,
                     NoSamplesError, SchemaInferError,
                     UnsupportedRootTypeError, get_generator_options,
                     read_samples)
from .node import ObservationNode
from .schema import DRAFT_06, DRAFT_07, Schema, assemble

LOGGER = singer.get_logger()


def str2bool(v):
    if isinstance(v, bool):
       return v
    if v.lower() in ("yes", "true", "t", "y", "1"):
        return True
    elif v.lower() in ("no", "false", "f", "n", "0"):
        return False
    else:
        raise argparse.ArgumentTypeError("Boolean value expected.")


def parse_args(argv=None):
    '''
    Parse command-line args.
    -c,--config     Config file
    --load          Previously generated schema to continue from
    -o,--output     Output file (stdout when omitted)
    For the config file, we will automatically load and parse the JSON file.
    '''
    parser = argparse.ArgumentParser("jsonschema-infer")

    parser.add_argument(
        "samples", nargs="+",
        help="JSON sample files")

    parser.add_argument(
        '-c', '--config',
        help='Config file')

    parser.add_argument(
        '--load',
        help='Schema file to continue from')

    parser.add_argument(
        '-o', '--output',
        help='Output file')

    parser.add_argument(
        '-l', '--lines',
        action='store_true',
        help='Each line of the sample files is a sample')

    # Overwrite the config values
    parser.add_argument(
        '--max_samples', type=int,
        help='Ignore the samples after this many')

    parser.add_argument(
        '--schema_version',
        help='draft-06 or draft-07')

    parser.add_argument(
        '--examples', type=str2bool,
        help='Record the first value as example')

    parser.add_argument(
        '--indent',
        help='Indentation string. Compact when empty')

    args = parser.parse_args(argv)

    if args.config:
        args.config = utils.load_json(args.config)
    else:
        args.config = {}
    if args.load and not os.path.isfile(args.load):
        raise Exception("Schema file %s not found" % args.load)

    return args


@utils.handle_top_exception(LOGGER)
def main(argv=None):
    """
    Entry point of jsonschema_infer
    """
    args = parse_args(argv)

    config = dict(args.config)

    # Overwrite config with the args given by the user
    for arg in ("max_samples", "schema_version", "examples", "indent"):
        value = getattr(args, arg)
        if value is not None:
            config[arg] = value

    generator = Generator(**get_generator_options(config))

    if args.load:
        LOGGER.info("Loading schema from %s", args.load)
        with open(args.load, "r") as f:
            generator.load(f.read())

    for path in args.samples:
        for sample in read_samples(path, args.lines,
                                   config.get("record_list_level")):
            generator.add_parsed_sample(sample)

    LOGGER.info("Generating schema from %d samples", generator.sample_count)
    if args.output:
        with open(args.output, "w") as f:
            generator.generate_to(f)
    else:
        generator.generate_to(sys.stdout)


if __name__ == "__main__":
    main()
