from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, conint

from agari.tiles import normalize_tile


class Wind(str, Enum):
    E = "E"
    S = "S"
    W = "W"
    N = "N"


class WinType(str, Enum):
    ron = "ron"
    tsumo = "tsumo"


class MeldType(str, Enum):
    chi = "chi"
    pon = "pon"
    kan = "kan"
    ankan = "ankan"
    kakan = "kakan"


QUAD_MELD_TYPES = {MeldType.kan, MeldType.ankan, MeldType.kakan}

TileCode = Annotated[str, AfterValidator(normalize_tile)]


class Meld(BaseModel):
    type: MeldType
    tiles: list[TileCode]

    @property
    def is_open(self) -> bool:
        return self.type != MeldType.ankan

    @property
    def is_quad(self) -> bool:
        return self.type in QUAD_MELD_TYPES


class HandInput(BaseModel):
    closed_tiles: list[TileCode]
    melds: list[Meld] = Field(default_factory=list)
    win_tile: TileCode | None = None

    @property
    def is_closed(self) -> bool:
        return not any(m.is_open for m in self.melds)


class RedDoraCount(BaseModel):
    m: conint(ge=0, le=4) = 0
    p: conint(ge=0, le=4) = 0
    s: conint(ge=0, le=4) = 0

    @property
    def total(self) -> int:
        return self.m + self.p + self.s


class ContextInput(BaseModel):
    win_type: WinType
    is_dealer: bool = False
    round_wind: Wind = Wind.E
    seat_wind: Wind = Wind.S
    riichi: bool = False
    double_riichi: bool = False
    ippatsu: bool = False
    haitei: bool = False
    houtei: bool = False
    rinshan: bool = False
    chankan: bool = False
    chiihou: bool = False
    tenhou: bool = False
    nagashi_mangan: bool = False
    dora_indicators: list[TileCode] = Field(default_factory=list)
    ura_dora_indicators: list[TileCode] = Field(default_factory=list)
    red_dora: RedDoraCount = Field(default_factory=RedDoraCount)
    honba: conint(ge=0) = 0
    kyotaku: conint(ge=0) = 0

    @property
    def is_tsumo(self) -> bool:
        return self.win_type == WinType.tsumo


class RuleSet(BaseModel):
    aka_ari: bool = True
    kuitan_ari: bool = True
    double_yakuman_ari: bool = True
    kazoe_yakuman_ari: bool = True
    renpu_fu: Literal[2, 4] = 2


class YakuItem(BaseModel):
    name: str
    han: int
    yakuman: bool = False


class FuBreakdownItem(BaseModel):
    name: str
    fu: int


class DoraBreakdown(BaseModel):
    dora: int = 0
    aka_dora: int = 0
    ura_dora: int = 0


class Points(BaseModel):
    ron: int = 0
    tsumo_dealer_pay: int = 0
    tsumo_non_dealer_pay: int = 0


class Payments(BaseModel):
    hand_points_received: int
    hand_points_with_honba: int
    honba_bonus: int = 0
    kyotaku_bonus: int = 0
    total_received: int


class ScoreBreakdown(BaseModel):
    base_text: str
    honba_text: str | None = None
    kyotaku_text: str | None = None


class PaymentResult(BaseModel):
    points: Points
    payments: Payments
    breakdown: ScoreBreakdown


class ScoreResult(BaseModel):
    han: int
    fu: int
    fu_breakdown: list[FuBreakdownItem] = Field(default_factory=list)
    yaku: list[YakuItem] = Field(default_factory=list)
    yakuman: list[str] = Field(default_factory=list)
    dora: DoraBreakdown = Field(default_factory=DoraBreakdown)
    point_label: str
    score: str
    points: Points
    payments: Payments
    breakdown: ScoreBreakdown


class ScoreErrorCode(str, Enum):
    wrong_hand_size = "wrong_hand_size"
    no_winning_tile = "no_winning_tile"
    not_a_winning_shape = "not_a_winning_shape"
    no_yaku_present = "no_yaku_present"


class ScoreError(BaseModel):
    code: ScoreErrorCode
    message: str
    details: dict | None = None


class ErrorResponse(BaseModel):
    error: ScoreError


class ScoreRequest(BaseModel):
    hand: HandInput
    context: ContextInput
    rules: RuleSet = Field(default_factory=RuleSet)


class ScoreResponse(BaseModel):
    score_id: UUID
    status: Literal["ok"]
    result: ScoreResult
    warnings: list[str] = Field(default_factory=list)


class HistoryEntryResponse(BaseModel):
    id: UUID
    created_at: datetime
    data: dict


class HistoryListResponse(BaseModel):
    limit: int
    entries: list[HistoryEntryResponse]


class ExpectedScore(BaseModel):
    kind: Literal["ron", "tsumo-oya", "tsumo-ko"]
    ron: int = 0
    per_person: int = 0
    ko: int = 0
    oya: int = 0

    model_config = ConfigDict(frozen=True)


class QuizQuestion(BaseModel):
    id: str
    label: str
    hand: list[TileCode]
    win_tile: TileCode
    context: ContextInput
    dora_indicators: list[TileCode] = Field(default_factory=list)
    presented_text: str
    expected_text: str
    is_correct: bool
