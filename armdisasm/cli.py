"""
ARMv4T disassembler — command line entry point.

Использование:
    python -m armdisasm rom.gba                  # ARM, листинг в stdout
    python -m armdisasm rom.gba out.txt          # Листинг в файл
    python -m armdisasm -t -b 0x08000000 code.bin
    python -m armdisasm -f "{addr:08X} {mnemonic}" code.bin
    python -m armdisasm --info code.bin          # Показать конфигурацию и выйти

Коды возврата:
    0 — успех
    1 — не удалось прочитать входной файл
    2 — не удалось открыть выходной файл
    3 — некорректные опции (шаблон вывода, базовый адрес)
"""

import sys
import argparse

from armdisasm.config import Config
from armdisasm.disassembler import Disassembler
from armdisasm.image import load_image, iter_words
from armdisasm.logger import Logger, LogLevel, LEVELS_BY_NAME
from armdisasm.report import DEFAULT_FORMAT, write_report


EXIT_OK = 0
EXIT_INPUT = 1
EXIT_OUTPUT = 2
EXIT_OPTIONS = 3


def parse_int(value):
    """Число из командной строки: десятичное или с префиксом 0x / 0o / 0b."""
    try:
        return int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid address: {value!r}")


def parse_args(argv=None):
    """Парсинг аргументов командной строки."""
    parser = argparse.ArgumentParser(
        prog="armdisasm",
        description="Disassembler for ARMv4T (ARM and Thumb) machine code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Format fields:
  {addr}       instruction address
  {instr}      raw instruction word
  {mnemonic}   disassembled text
        """
    )
    parser.add_argument("-b", "--base", type=parse_int, default=0,
                        help="Base address (default: 0)")
    parser.add_argument("-t", "--thumb", action="store_true",
                        help="Disassemble as Thumb")
    parser.add_argument("-f", "--format", default=DEFAULT_FORMAT,
                        help=f"Output format (default: {DEFAULT_FORMAT!r})")
    parser.add_argument("--log-level", default="warn",
                        choices=list(LEVELS_BY_NAME),
                        help="Log level (default: warn)")
    parser.add_argument("--log-file", default=None,
                        help="Log to file")
    parser.add_argument("--trace", action="store_true",
                        help="Trace every decoded instruction")
    parser.add_argument("--info", action="store_true",
                        help="Show configuration and exit")
    parser.add_argument("input",
                        help="Input file")
    parser.add_argument("output", nargs="?", default=None,
                        help="Output file (default: stdout)")
    return parser.parse_args(argv)


def build_config(args):
    """Собрать Config из аргументов."""
    config = Config(input_path=args.input, output_path=args.output)
    config.base_address = args.base
    config.thumb = args.thumb
    config.output_format = args.format
    config.log_level = LEVELS_BY_NAME.get(args.log_level, LogLevel.WARN)
    if args.trace:
        config.log_level = LogLevel.TRACE
    config.log_file = args.log_file
    return config


def run(config, logger):
    """Прочитать файл, дизассемблировать, записать листинг."""
    try:
        data = load_image(config.input_path)
    except OSError as e:
        logger.error("LOAD", f"Cannot read file {config.input_path}: {e}")
        return EXIT_INPUT

    logger.info("LOAD", f"Read {len(data)} bytes from {config.input_path}")

    disassembler = Disassembler(thumb=config.thumb,
                                base=config.base_address,
                                logger=logger)
    lines = disassembler.disassemble(iter_words(data, config.instruction_size))

    if config.output_path is None:
        count = write_report(lines, config.output_format, sys.stdout)
    else:
        try:
            stream = open(config.output_path, 'w')
        except OSError as e:
            logger.error("CLI", f"Cannot open file {config.output_path}: {e}")
            return EXIT_OUTPUT
        with stream:
            count = write_report(lines, config.output_format, stream)

    logger.info("DASM", f"{count} instructions ({config.mode_name}), "
                        f"{disassembler.undefined_count} undefined")
    return EXIT_OK


def main(argv=None):
    """Главная функция."""
    args = parse_args(argv)
    config = build_config(args)

    logger = Logger(level=config.log_level, log_file=config.log_file)
    try:
        if args.info:
            print(config.get_info())
            return EXIT_OK

        ok, errors = config.validate()
        for warning in config.warnings:
            logger.warn("CLI", warning)
        if not ok:
            for err in errors:
                logger.error("CLI", err)
            # Нет входного файла: ошибка чтения; иначе ошибка опций
            if not config.input_exists:
                return EXIT_INPUT
            return EXIT_OPTIONS

        return run(config, logger)
    finally:
        logger.close()


if __name__ == "__main__":
    sys.exit(main())
