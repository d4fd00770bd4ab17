# macocr/ocr/vision_impl.py
from typing import List

import objc
import Vision
from Foundation import NSData

from .base import OcrEngine, OcrEngineError, Point, TextObservation


def _point(cg_point) -> Point:
    return float(cg_point.x), float(cg_point.y)


class VisionEngine(OcrEngine):
    """
    Apple Vision text recognition (macOS only, through pyobjc).

    Vision already reports corners in the normalized, bottom-left-origin
    space the rest of the pipeline expects.
    """

    name = "vision"

    def _make_request(self):
        request = Vision.VNRecognizeTextRequest.alloc().init()
        request.setRevision_(Vision.VNRecognizeTextRequestRevision3)
        request.setRecognitionLevel_(Vision.VNRequestTextRecognitionLevelAccurate)
        request.setUsesLanguageCorrection_(True)
        request.setAutomaticallyDetectsLanguage_(True)
        return request

    def recognize(self, image_bytes: bytes) -> List[TextObservation]:
        with objc.autorelease_pool():
            data = NSData.dataWithBytes_length_(image_bytes, len(image_bytes))
            request = self._make_request()
            handler = Vision.VNImageRequestHandler.alloc().initWithData_options_(data, {})

            ok, error = handler.performRequests_error_([request], None)
            if not ok:
                raise OcrEngineError(f"Vision request failed: {error}")

            observations: List[TextObservation] = []
            for obs in request.results() or []:
                candidates = obs.topCandidates_(1)
                if not candidates:
                    continue
                best = candidates[0]
                observations.append(
                    TextObservation(
                        text=str(best.string()),
                        confidence=float(best.confidence()),
                        top_left=_point(obs.topLeft()),
                        top_right=_point(obs.topRight()),
                        bottom_right=_point(obs.bottomRight()),
                        bottom_left=_point(obs.bottomLeft()),
                    )
                )
            return observations
