"""Public interface for the room acoustics and loudspeaker placement core."""

from .acoustics.model import (
    AcousticModel,
    clarity_index,
    cube_equivalent_area,
    reverberation_time,
    room_modes,
    speech_transmission_index,
)
from .analysis import (
    AnalysisPipeline,
    ProgressCallback,
    RoomAnalysis,
    analyze_in_background,
    analyze_room,
    select_best_configuration,
)
from .errors import DegenerateRoomError, EmptyGeometryWarning
from .issues import AcousticIssue, IssueType, Severity, detect_issues, most_severe
from .materials import DEFAULT_MATERIAL, available_materials, material_by_name
from .placement import (
    PlacementGenerator,
    SpeakerConfiguration,
    SpeakerPlacement,
    SpeakerSystem,
    SpeakerType,
    generate_placements,
    listening_position,
)
from .recommendations import build_suggestions, system_recommendations
from .room import (
    AcousticProperties,
    Material,
    Obstacle,
    ObstacleType,
    RoomData,
    RoomDimensions,
    ScanQuality,
    Surface,
    SurfaceType,
    Vector3,
)
from .scoring import ScoreBreakdown, SystemScorer, rank_systems, score_breakdown, score_system
from .serialization import (
    analysis_json_schemas,
    dataclass_schema,
    decode_analysis,
    decode_room,
    dumps_analysis,
    dumps_room,
    encode_analysis,
    encode_room,
    loads_analysis,
    loads_room,
)
from .settings import DEFAULT_SETTINGS, AnalysisSettings

__all__ = [
    "Vector3",
    "RoomDimensions",
    "Material",
    "Surface",
    "SurfaceType",
    "Obstacle",
    "ObstacleType",
    "ScanQuality",
    "AcousticProperties",
    "RoomData",
    "DEFAULT_MATERIAL",
    "available_materials",
    "material_by_name",
    "AnalysisSettings",
    "DEFAULT_SETTINGS",
    "DegenerateRoomError",
    "EmptyGeometryWarning",
    "AcousticModel",
    "reverberation_time",
    "room_modes",
    "clarity_index",
    "speech_transmission_index",
    "cube_equivalent_area",
    "SpeakerType",
    "SpeakerConfiguration",
    "SpeakerPlacement",
    "SpeakerSystem",
    "PlacementGenerator",
    "generate_placements",
    "listening_position",
    "ScoreBreakdown",
    "SystemScorer",
    "score_system",
    "score_breakdown",
    "rank_systems",
    "IssueType",
    "Severity",
    "AcousticIssue",
    "detect_issues",
    "most_severe",
    "build_suggestions",
    "system_recommendations",
    "AnalysisPipeline",
    "ProgressCallback",
    "RoomAnalysis",
    "analyze_room",
    "analyze_in_background",
    "select_best_configuration",
    "dataclass_schema",
    "analysis_json_schemas",
    "encode_room",
    "decode_room",
    "encode_analysis",
    "decode_analysis",
    "dumps_room",
    "loads_room",
    "dumps_analysis",
    "loads_analysis",
]
