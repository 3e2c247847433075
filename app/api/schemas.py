from pydantic import BaseModel
from typing import Optional


class PredictOut(BaseModel):
    id: str
    phien_truoc: Optional[str] = None
    ket_qua: Optional[str] = None
    xuc_xac: list[int] = []
    tong: Optional[int] = None
    phien_sau: Optional[int] = None
    du_doan: str
    do_tin_cay: str
    du_doan_vi: Optional[list[int]] = None
    giai_thich: str


class RunOut(BaseModel):
    start: int
    end: int
    outcome: str
    length: int


class StatsOut(BaseModel):
    window: int
    history_length: int
    high_count: int
    low_count: int
    high_ratio: float
    low_ratio: float
    last_outcome: str | None
    current_streak: int
    runs: list[RunOut]


class ErrorOut(BaseModel):
    error: str
    chi_tiet: str
