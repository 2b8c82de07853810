import argparse
import json
import logging
import os
import sys
import time

from .config.config import DEFAULT_STRATEGY
from .cst import STRATEGIES, get_strategy
from .exceptions import CstError
from .pipeline import process_source
from .utils import CstArtifactEncoder, TerminalColors


def main():
    start_time = time.perf_counter()

    # This provides a single source of truth for stage names and their order.
    STAGE_MAP = {
        "1": ("tokens", "Token Stream (semantic and extra tokens)"),
        "2": ("ast", "Abstract Syntax Tree"),
        "3": ("cst", "Concrete Syntax Tree"),
        "4": ("projection", "Projected AST"),
        "5": ("reconstruction", "Reconstructed Source"),
    }

    # Dynamically generate help text for the --stage argument
    stage_help_text = "Run up to a specific stage and save the intermediate artifact. "
    for key, (name, desc) in STAGE_MAP.items():
        stage_help_text += f"'{key}' for {desc}. "
    stage_help_text += "Omitting this flag runs the full round trip and writes the CST as .cst.json."

    parser = argparse.ArgumentParser(description="Build a lossless concrete syntax tree for a JavaScript file.")
    parser.add_argument(
        "input_file",
        nargs="?",
        default=None,
        help="The path to the input .js file. Omit to read from stdin.",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="output_file",
        help="The path to the output .json file. Only used for a full run.",
    )
    parser.add_argument("-s", "--strategy", choices=STRATEGIES.keys(), default=DEFAULT_STRATEGY, help="The extras attachment strategy.")
    parser.add_argument("-c", "--stage", type=str, choices=STAGE_MAP.keys(), help=stage_help_text)
    parser.add_argument("--labels", action="store_true", help="Print the label table of the chosen strategy and exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # --- Label Table ---
    if args.labels:
        print(json.dumps(get_strategy(args.strategy).label_table(), indent=2))
        return

    # --- Input Validation ---
    if not args.input_file and sys.stdin.isatty():
        parser.error("input_file is required when not reading from a pipe.")

    script_path_for_display = args.input_file or "stdin"
    print(f"--- Processing {script_path_for_display} ({args.strategy}) ---")

    try:
        # --- Read Input ---
        if not args.input_file:
            script_content = sys.stdin.read()
            input_file_path_abs = None
        else:
            input_file_path_abs = os.path.abspath(args.input_file)
            # newline="" keeps \r\n intact, the round trip is byte exact.
            with open(input_file_path_abs, "r", encoding="utf-8", newline="") as f:
                script_content = f.read()

        # --- Determine Pipeline Stop Point ---
        stop_after_stage = None
        if args.stage:
            stop_after_stage, stage_desc = STAGE_MAP[args.stage]

        # The pipeline will automatically save the artifact if requested
        dump_stages = [stop_after_stage] if stop_after_stage else []

        # --- Run Pipeline ---
        final_product = process_source(
            script_content,
            file_path=input_file_path_abs,
            strategy=args.strategy,
            dump_stages=dump_stages,
            stop_after_stage=stop_after_stage,
        )

        # --- Handle Output ---
        if stop_after_stage:
            # The pipeline already prints the "Saving artifact" message.
            print(f"\n{TerminalColors.GREEN}--- Stage '{args.stage} ({stage_desc})' successful ---{TerminalColors.RESET}")
        else:
            if args.output_file:
                raw_output_path = args.output_file
            elif args.input_file:
                raw_output_path = os.path.splitext(args.input_file)[0] + ".cst.json"
            else:
                raw_output_path = "stdin.cst.json"

            output_file_path = os.path.abspath(raw_output_path)
            # Ensure the directory exists before writing
            os.makedirs(os.path.dirname(output_file_path), exist_ok=True)

            with open(output_file_path, "w", encoding="utf-8") as f:
                json.dump(final_product, f, indent=2, cls=CstArtifactEncoder)

            print(f"\n{TerminalColors.GREEN}--- Round Trip Successful ---{TerminalColors.RESET}")
            print(f"CST written to {output_file_path}")

    # --- Error Handling ---
    except CstError as e:
        print(
            f"\n{TerminalColors.RED}--- CST ERROR ---\n{e}{TerminalColors.RESET}",
            file=sys.stderr,
        )
        sys.exit(1)
    except FileNotFoundError:
        print(
            f"{TerminalColors.RED}ERROR: Script file '{script_path_for_display}' not found.{TerminalColors.RESET}",
            file=sys.stderr,
        )
        sys.exit(1)
    except Exception as e:
        print(
            f"\n{TerminalColors.RED}--- UNEXPECTED ERROR ---{TerminalColors.RESET}",
            file=sys.stderr,
        )
        print("This may be a bug in escst. Please report it.", file=sys.stderr)
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)

    finally:
        # --- Execution Time ---
        end_time = time.perf_counter()
        duration = end_time - start_time
        print(f"\n{TerminalColors.CYAN}--- Total Execution Time: {duration:.4f} seconds ---{TerminalColors.RESET}")


if __name__ == "__main__":
    main()
