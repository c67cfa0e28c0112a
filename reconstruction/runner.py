"""Command loop and CLI entry point for the Reconstruction simulation"""

import os
import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO

from dotenv import load_dotenv

from reconstruction.simulation import Simulation
from reconstruction.config import load_config
from reconstruction.actions import CommandError, run_command
from reconstruction.visualization import PlanRenderer

logger = logging.getLogger(__name__)

PROMPT = "Enter an action: "


@dataclass
class RunnerConfig:
    """Configuration for the simulation runner"""
    config_path: Path
    script_path: Optional[Path] = None
    render_dir: Optional[Path] = None
    log_level: str = "WARNING"
    log_file: Optional[Path] = None


def setup_logging(config: RunnerConfig):
    if config.log_file:
        handlers = [logging.FileHandler(config.log_file)]
    else:
        handlers = [logging.StreamHandler()]
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


class SimulationRunner:
    """Feeds command lines to a simulation until it is closed"""

    def __init__(self, config: RunnerConfig, output: Optional[TextIO] = None):
        self.config = config
        self.simulation = load_config(config.config_path, Simulation(output))

    def interactive_lines(self) -> Iterator[str]:
        while True:
            try:
                yield input(PROMPT)
            except EOFError:
                return

    def script_lines(self) -> Iterator[str]:
        with open(self.config.script_path, 'r') as f:
            for line in f:
                yield line

    def run(self, lines: Optional[Iterable[str]] = None) -> Simulation:
        """Run commands until ``close`` or the input runs out"""
        if lines is None:
            lines = self.script_lines() if self.config.script_path else self.interactive_lines()

        self.simulation.open()
        for line in lines:
            try:
                run_command(self.simulation, line)
            except CommandError as e:
                self.simulation.emit(f"Error: {e}")
                continue
            if not self.simulation.is_running:
                break

        if self.config.render_dir and not self.simulation.is_running:
            self.render_plans()
        return self.simulation

    def render_plans(self):
        renderer = PlanRenderer()
        for plan in self.simulation.plans:
            renderer.save(plan, self.config.render_dir)


def parse_args(argv=None) -> RunnerConfig:
    """Parse command line arguments, falling back to the environment"""
    load_dotenv()

    parser = argparse.ArgumentParser(description='Run a settlement reconstruction simulation')
    parser.add_argument(
        'config_path',
        type=Path,
        help='Path to the configuration file'
    )
    parser.add_argument(
        '--script',
        type=Path,
        default=None,
        help='Read commands from this file instead of the console'
    )
    parser.add_argument(
        '--render-dir',
        type=Path,
        default=os.getenv('RECONSTRUCTION_RENDER_DIR'),
        help='Save a status card per plan to this directory on close'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default=os.getenv('RECONSTRUCTION_LOG_LEVEL', 'WARNING'),
        help='Logging level (DEBUG, INFO, WARNING, ...)'
    )
    parser.add_argument(
        '--log-file',
        type=Path,
        default=os.getenv('RECONSTRUCTION_LOG_FILE'),
        help='Write logs to this file instead of stderr'
    )

    args = parser.parse_args(argv)
    return RunnerConfig(
        config_path=args.config_path,
        script_path=args.script,
        render_dir=Path(args.render_dir) if args.render_dir else None,
        log_level=args.log_level,
        log_file=Path(args.log_file) if args.log_file else None,
    )


def main(argv=None):
    config = parse_args(argv)
    setup_logging(config)
    runner = SimulationRunner(config)
    runner.run()


if __name__ == '__main__':
    main()
