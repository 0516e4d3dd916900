from popit.audio.errors import AudioError, InvalidInput, EncodingUnavailable
from popit.audio.synth import SynthParams, PopSynthesizer, synth_params, synthesize
from popit.audio.wav_encoder import encode, HEADER_SIZE
