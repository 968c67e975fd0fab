"""RU: Перекодирование RTSP-потоков в HLS через FFmpeg.

EN: Transcode RTSP streams to HLS with FFmpeg.
"""

__version__ = "0.1.0"
