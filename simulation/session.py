# simulation/session.py
"""
Session directory manager.

Each exported run gets its own session directory under workspace/,
containing the inputs, result JSON, spectrum CSV files, and plots.

Usage:
    from simulation.session import SessionManager

    sm = SessionManager()
    session_dir = sm.create_session(label='core_shell')
    sm.save_inputs(session_dir, inputs)
    sm.save_result(session_dir, result)
    sm.save_spectrum_csv(session_dir, result)
"""

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional, List

import numpy as np

from .inputs import SimulationInputs

logger = logging.getLogger(__name__)

# Default workspace directory (current working directory)
DEFAULT_WORKSPACE = Path('workspace')

SUBDIRS = ('data', 'plots')


class SessionManager:
    """Manages export session directories."""

    def __init__(self, workspace: Optional[Path] = None):
        """
        Initialize session manager.

        Args:
            workspace: Root workspace directory.
                       Defaults to ./workspace/
        """
        self.workspace = Path(workspace) if workspace else DEFAULT_WORKSPACE

    def create_session(self, label: str = '') -> Path:
        """
        Create a new session directory.

        Directory name: session_YYYYMMDD_HHMMSS[_label]; a numeric suffix is
        added if that name already exists.

        Args:
            label: Optional descriptive label appended to directory name

        Returns:
            Path to the new session directory
        """
        self.workspace.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        name = f'session_{timestamp}'
        if label:
            safe_label = ''.join(c if c.isalnum() or c in '-_' else '_'
                                  for c in label)
            name = f'{name}_{safe_label}'

        session_dir = self.workspace / name
        n = 1
        while session_dir.exists():
            session_dir = self.workspace / f'{name}_{n}'
            n += 1
        session_dir.mkdir(parents=True)

        for sub in SUBDIRS:
            (session_dir / sub).mkdir(exist_ok=True)

        logger.info("Created session %s", session_dir)
        return session_dir

    def save_inputs(self, session_dir: Path, inputs: SimulationInputs) -> Path:
        """Save inputs to <session>/inputs.json."""
        path = Path(session_dir) / 'inputs.json'
        inputs.save(path)
        return path

    def load_inputs(self, session_dir: Path) -> SimulationInputs:
        """Load inputs from <session>/inputs.json."""
        return SimulationInputs.load(Path(session_dir) / 'inputs.json')

    def save_result(self, session_dir: Path, result, name: str = 'result') -> Path:
        """
        Save a SimulationResult as JSON under data/.

        Returns:
            Path to the written file
        """
        path = Path(session_dir) / 'data' / f'{name}.json'
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(result.to_dict(), indent=2), encoding='utf-8')
        logger.info("Saved result %s", path)
        return path

    def save_spectrum_csv(self, session_dir: Path, result, name: str = 'spectrum') -> Path:
        """
        Save wavelength, mixed and host intensities as CSV under data/.

        Returns:
            Path to the written file
        """
        path = Path(session_dir) / 'data' / f'{name}.csv'
        path.parent.mkdir(parents=True, exist_ok=True)
        table = np.column_stack([
            result.spectrum.wavelength_nm,
            result.spectrum.intensity,
            result.host_spectrum.intensity,
        ])
        np.savetxt(path, table, delimiter=',', fmt=['%.0f', '%.6e', '%.6e'],
                   header='wavelength_nm,intensity_mixed,intensity_host', comments='')
        logger.info("Saved spectrum %s", path)
        return path

    def list_sessions(self) -> List[Path]:
        """
        List all session directories, newest first.

        Returns:
            List of session directory paths
        """
        if not self.workspace.exists():
            return []
        return sorted(
            [d for d in self.workspace.iterdir()
             if d.is_dir() and d.name.startswith('session_')],
            reverse=True
        )

    def get_latest_session(self) -> Optional[Path]:
        """Return most recent session directory, or None."""
        sessions = self.list_sessions()
        return sessions[0] if sessions else None

    def delete_session(self, session_dir: Path) -> None:
        """
        Delete a session directory and all contents.

        Args:
            session_dir: Session directory to delete
        """
        session_dir = Path(session_dir)
        if session_dir.exists() and session_dir.is_dir():
            shutil.rmtree(session_dir)

    def session_summary(self, session_dir: Path) -> dict:
        """
        Get a summary of session contents.

        Returns:
            Dict with counts: n_data, n_plots, has_inputs
        """
        session_dir = Path(session_dir)
        return {
            'name': session_dir.name,
            'has_inputs': (session_dir / 'inputs.json').exists(),
            'n_data': len(list((session_dir / 'data').glob('*')))
                      if (session_dir / 'data').exists() else 0,
            'n_plots': len(list((session_dir / 'plots').glob('*')))
                       if (session_dir / 'plots').exists() else 0,
        }
