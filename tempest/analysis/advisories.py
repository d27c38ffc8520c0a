"""
Rule-based optimisation suggestions for an analysed voyage.
"""

from dataclasses import dataclass
from typing import Dict, List

from tempest.analysis.laycan import LaycanStatus

# Fuel above this multiple of the calm-water baseline suggests slowing down
FUEL_EXCESS_RATIO = 1.2
HIGH_WIND_KTS = 20.0


@dataclass(frozen=True)
class Advisory:
    type: str
    description: str
    impact: str

    def to_dict(self) -> Dict:
        return {'type': self.type, 'description': self.description, 'impact': self.impact}


def speed_advisory(analysis) -> Advisory:
    """Suggest one knot below service speed when weather inflates fuel burn."""
    vessel = analysis.vessel
    totals = analysis.totals
    baseline = vessel.fuel_consumption_tpd * totals.total_duration_hours / 24.0

    if totals.total_fuel_tons > baseline * FUEL_EXCESS_RATIO:
        return Advisory(
            type="SPEED_ADJUSTMENT",
            description=(
                f"Consider reducing speed to {vessel.service_speed_kts - 1:g} knots "
                f"to save fuel in adverse weather"
            ),
            impact="Potential fuel savings: 15-25%",
        )
    return Advisory(
        type="SPEED_ADJUSTMENT",
        description="Current speed appears optimal for conditions",
        impact="Maintaining current efficiency",
    )


def routing_advisory(analysis) -> Advisory:
    if analysis.weather_impact.average_wind_speed_kts > HIGH_WIND_KTS:
        description = "High winds detected - consider slight route deviation if possible"
    else:
        description = "Weather conditions favorable for current route"

    if analysis.laycan.status == LaycanStatus.LATE:
        impact = "Could recover 2-4 hours"
    else:
        impact = "Maintain schedule reliability"

    return Advisory(type="WEATHER_ROUTING", description=description, impact=impact)


def optimization_suggestions(analysis) -> List[Advisory]:
    """Speed and routing suggestions for a VoyageAnalysis, in that order."""
    return [speed_advisory(analysis), routing_advisory(analysis)]
