"""
Tests for the pop container store
"""

import atexit
import os
import tempfile

import pytest
from popit.audio.sound_store import SoundStore
from popit.audio.errors import EncodingUnavailable

def test_write_and_cleanup_temp_dir():
    """Test files land in a private temp dir that is removed on cleanup."""
    store = SoundStore()
    path = store.write(0, b'RIFFdata')
    
    assert path.name == "pop_0.wav"
    assert path.read_bytes() == b'RIFFdata'
    
    store.cleanup()
    assert not path.exists()
    assert not store.directory.exists()

def test_explicit_directory_is_kept(tmp_path):
    """Test only written files are removed from a caller-owned directory."""
    other = tmp_path / "keep.txt"
    other.write_text("x")
    
    with SoundStore(str(tmp_path)) as store:
        for v in range(4):
            store.write(v, bytes([v]))
        assert sorted(os.listdir(tmp_path)) == ["keep.txt", "pop_0.wav", "pop_1.wav", "pop_2.wav", "pop_3.wav"]
    
    assert os.listdir(tmp_path) == ["keep.txt"]

def test_cleanup_is_idempotent(tmp_path):
    """Test cleanup can run twice and tolerates missing files."""
    store = SoundStore(str(tmp_path))
    path = store.write(1, b'x')
    path.unlink()
    store.cleanup()
    store.cleanup()
    assert store.closed

def test_write_after_cleanup_fails(tmp_path):
    """Test a closed store refuses new files."""
    store = SoundStore(str(tmp_path))
    store.cleanup()
    with pytest.raises(EncodingUnavailable):
        store.write(0, b'x')

def test_write_failure_raises_encoding_unavailable(tmp_path):
    """Test I/O errors surface as EncodingUnavailable."""
    store = SoundStore(str(tmp_path))
    # A directory in the way makes the write fail
    store.path_for(2).mkdir()
    with pytest.raises(EncodingUnavailable):
        store.write(2, b'x')
    store.cleanup()

def test_temp_dir_failure_raises_encoding_unavailable(monkeypatch):
    """Test a failing temp dir surfaces as EncodingUnavailable."""
    def no_space(*args, **kwargs):
        raise OSError(28, "No space left on device")
    monkeypatch.setattr(tempfile, "mkdtemp", no_space)
    
    with pytest.raises(EncodingUnavailable):
        SoundStore()

def test_explicit_dir_failure_raises_encoding_unavailable(tmp_path):
    """Test a file where the directory should be is reported, not raised raw."""
    blocker = tmp_path / "pops"
    blocker.write_text("not a directory")
    with pytest.raises(EncodingUnavailable):
        SoundStore(str(blocker))

def test_cleanup_registered_at_exit(monkeypatch, tmp_path):
    """Test the store hooks interpreter exit and unhooks after cleanup."""
    calls = []
    monkeypatch.setattr(atexit, "register", lambda fn: calls.append(("register", fn)))
    monkeypatch.setattr(atexit, "unregister", lambda fn: calls.append(("unregister", fn)))
    
    store = SoundStore(str(tmp_path))
    assert calls == [("register", store.cleanup)]
    
    store.cleanup()
    store.cleanup()
    assert calls == [("register", store.cleanup), ("unregister", store.cleanup)]
