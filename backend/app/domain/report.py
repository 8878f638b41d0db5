"""
Operational Report Domain Model

Generated reports are stored in `reportes_operativos` with their filters and
computed data so they can be listed and reopened later.

Author: TM3
Date: 2025-08-12
"""
from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional, Dict, Any
from datetime import date, datetime


REPORT_TYPES = ['comisiones', 'ventas', 'stock', 'entregas']


class Report(BaseModel):
    """
    Report domain model - represents a row of `reportes_operativos`

    Fields:
        numero_reporte: REP-YYYYMMDD-NNNN
        tipo: comisiones | ventas | stock | entregas
        comercial_id: Commercial the report belongs to
        periodo_inicio / periodo_fin: Covered period
        filtros: Filters used to build it
        datos: Computed report payload
    """

    id: str = Field(..., description="Report ID")
    numero_reporte: str = Field(..., description="Report number")
    tipo: str = Field(..., description="Report type")
    comercial_id: Optional[str] = Field(None, description="Commercial ID")
    periodo_inicio: Optional[date] = Field(None, description="Period start")
    periodo_fin: Optional[date] = Field(None, description="Period end")
    filtros: Dict[str, Any] = Field(default_factory=dict, description="Filters")
    datos: Dict[str, Any] = Field(default_factory=dict, description="Report data")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        data = self.model_dump()
        for field in ['periodo_inicio', 'periodo_fin', 'created_at', 'updated_at']:
            if data.get(field):
                data[field] = data[field].isoformat()
        return data


class ReportPeriod(BaseModel):
    """Date range of a report request"""
    start_date: date
    end_date: date
    comercial_id: Optional[str] = Field(None, description="Admins only: report for another commercial")

    @model_validator(mode='after')
    def check_range(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self
