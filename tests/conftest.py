from __future__ import annotations

from pathlib import Path

import pytest

from service_reports.config import NormalizerSettings
from service_reports.domain.service_record import ServiceRecord
from service_reports.validators.record_normalizer import RecordNormalizer

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
SAMPLE_CSV = DATA_DIR / "Datos-ONIET-2025---seguros-prestaciones.csv"
SAMPLE_JSON = DATA_DIR / "Datos-ONIET-2025---seguros-prestaciones.json"

HEADER = "NumeroRegistro,CompaniaSeguro,Anio,Mes,CantidadServicios,Region,ValorPorServicio,PorcentajeCobertura"


def make_record(
    record_number: int = 1,
    insurer_name: str = "Acme",
    year: int = 2024,
    month: int = 1,
    service_count: float = 1.0,
    region: str = "North",
    unit_price: float = 100.0,
    coverage_percent: float = 50.0,
) -> ServiceRecord:
    return ServiceRecord(
        record_number=record_number,
        insurer_name=insurer_name,
        year=year,
        month=month,
        service_count=service_count,
        region=region,
        unit_price=unit_price,
        coverage_percent=coverage_percent,
    )


@pytest.fixture()
def normalizer() -> RecordNormalizer:
    return RecordNormalizer(NormalizerSettings(log_validation_errors=False))


@pytest.fixture()
def scenario_a_csv() -> str:
    return (
        f"{HEADER}\n"
        "1,Acme,2024,3,10,North,100,50\n"
        "2,Acme,2024,4,5,South,100,50"
    )
