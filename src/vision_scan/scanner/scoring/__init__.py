from .model import Scorer, ScanOutcomes, Finding

__all__ = ['Scorer', 'ScanOutcomes', 'Finding']
