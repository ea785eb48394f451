from .panchang import (
    PanchangRecord,
    PanchangRangeVM,
    LocationVM,
    TithiVM,
    NakshatraVM,
    YogaVM,
    KaranaVM,
    TimingsVM,
    MoonDataVM,
    AuspiciousTimesVM,
    InauspiciousTimesVM,
    MasaVM,
    DoshaIntervalVM,
    ProvenanceVM,
    CityVM,
    ReverseGeocodeVM,
)
