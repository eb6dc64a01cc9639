from .generators import PatientDataSimulator

__all__ = ["PatientDataSimulator"]
