"""
Pop It Bubble - Ephemeral storage for generated pop containers
"""

import atexit
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional

from popit.core.constants import POP_FILE_TEMPLATE
from popit.core.logger import get_audio_logger
from popit.audio.errors import EncodingUnavailable


class SoundStore:
    """
    Writes pop_<variation>.wav files and removes them on cleanup.
    
    Without an explicit directory a private temp directory is created and
    deleted along with the files. Cleanup also runs at interpreter exit.
    """
    
    def __init__(self, directory: Optional[str] = None):
        self._owns_directory = directory is None
        try:
            if directory is None:
                self.directory = Path(tempfile.mkdtemp(prefix="popit_"))
            else:
                self.directory = Path(directory)
                self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise EncodingUnavailable(f"Could not create sound directory: {e}") from e
        self.files: Dict[int, Path] = {}
        self.closed = False
        atexit.register(self.cleanup)
    
    def path_for(self, variation: int) -> Path:
        return self.directory / POP_FILE_TEMPLATE.format(variation=variation)
    
    def write(self, variation: int, data: bytes) -> Path:
        """Persist one container. Raises EncodingUnavailable on I/O failure."""
        if self.closed:
            raise EncodingUnavailable("Sound store already cleaned up")
        path = self.path_for(variation)
        try:
            path.write_bytes(data)
        except OSError as e:
            raise EncodingUnavailable(f"Could not write {path}: {e}") from e
        self.files[variation] = path
        get_audio_logger().debug(f"Stored pop variation {variation} at {path} ({len(data)} bytes)")
        return path
    
    def cleanup(self):
        """Delete every stored container. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        atexit.unregister(self.cleanup)
        
        for path in self.files.values():
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                get_audio_logger().warning(f"Failed to delete {path}: {e}")
        self.files.clear()
        
        if self._owns_directory:
            shutil.rmtree(self.directory, ignore_errors=True)
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False
