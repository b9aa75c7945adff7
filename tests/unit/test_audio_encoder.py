"""Tests for AudioEncoder (finalizing captured PCM into an audio file)."""

import io

import numpy as np
import pytest
import soundfile as sf

from audioscribe.services.audio.encoder import AudioEncoder


class TestAudioEncoder:
    def test_wav_artifact(self, tone):
        encoder = AudioEncoder(sample_rate=16000, channels=1, audio_format="wav")
        pcm = tone(0.5)

        artifact = encoder.finalize([pcm[:4000], pcm[4000:]])

        assert artifact.media_type == "audio/wav"
        assert artifact.filename == "recording.wav"
        assert artifact.duration == pytest.approx(0.5)
        samples, rate = sf.read(io.BytesIO(artifact.data), dtype="int16")
        assert rate == 16000
        assert samples.tobytes() == pcm

    def test_flac_is_lossless(self, tone):
        pcm = tone(0.25)

        artifact = AudioEncoder(audio_format="flac").finalize([pcm])

        assert artifact.media_type == "audio/flac"
        samples, _ = sf.read(io.BytesIO(artifact.data), dtype="int16")
        assert samples.tobytes() == pcm

    def test_stereo_frames(self):
        left_right = np.array([[100, -100]] * 800, dtype=np.int16)

        artifact = AudioEncoder(channels=2).finalize([left_right.tobytes()])

        samples, _ = sf.read(io.BytesIO(artifact.data), dtype="int16")
        assert samples.shape == (800, 2)
        assert artifact.duration == pytest.approx(0.05)

    def test_partial_frame_dropped(self):
        artifact = AudioEncoder().finalize([b"\x01\x00\x02"])

        samples, _ = sf.read(io.BytesIO(artifact.data), dtype="int16")
        assert samples.tolist() == [1]

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            AudioEncoder(audio_format="mp3")
