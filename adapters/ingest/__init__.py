from .reader import FileDataReader, MeasurementParseError, ParsedMeasurement, parse_measurement_line

__all__ = ["FileDataReader", "MeasurementParseError", "ParsedMeasurement", "parse_measurement_line"]
