"""
Advisory Module

Display-ready guidance derived from a metrics snapshot, the catalog, or a
weather reading. Every function here is pure.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

from core.catalog import BuildingCatalog
from core.models import Category, EnvironmentalMetrics, Prediction
from core.scoring import score
from loaders.weather import WeatherReading


GENERAL_TIPS = [
    "Create 15-minute neighborhoods where daily necessities are accessible within a short walk or bike ride.",
    "Design blue-green infrastructure to manage water while providing recreational spaces.",
    "Implement circular economy principles by placing recycling facilities near industrial and commercial zones.",
]

MIN_PREDICTIONS = 3


# ═══════════════════════════════════════════════════════════════════════════
# IMPROVEMENT TIPS
# ═══════════════════════════════════════════════════════════════════════════
def improvement_tips(metrics: EnvironmentalMetrics) -> List[str]:
    """Threshold-triggered advice per field, followed by GENERAL_TIPS."""
    tips = []

    if metrics.emissions > 100:
        tips.append("High emissions: Add more green spaces and renewable energy sources to reduce your carbon footprint by up to 40%.")
        tips.append("Consider replacing some industrial buildings with cleaner alternatives and position them away from residential areas.")
    elif metrics.emissions > 50:
        tips.append("Moderate emissions: Add solar or wind farms to reduce your carbon footprint and create energy independence.")

    if metrics.energy > 100:
        tips.append("High energy use: Add renewable energy sources like solar and wind farms to create a sustainable energy grid.")
        tips.append("Consider implementing green roofs and energy-efficient buildings to reduce consumption by up to 30%.")
    elif metrics.energy > 50:
        tips.append("Energy efficiency: Add green roofs to reduce building energy consumption and create a cooler microclimate.")

    if metrics.water > 80:
        tips.append("High water usage: Add more parks and water retention systems to improve water management and reduce consumption.")
        tips.append("Create rain gardens and bioswales near impervious surfaces to manage stormwater sustainably.")
    elif metrics.water > 40:
        tips.append("Water conservation: Implement water recycling systems and drought-resistant landscaping to reduce usage.")

    if metrics.heat > 70:
        tips.append("Urban heat island effect: Add more parks, tree-lined streets, and green roofs to reduce temperatures by up to 5°C.")
        tips.append("Create connected green corridors throughout your city to improve air circulation and cooling.")
    elif metrics.heat > 40:
        tips.append("Temperature management: Add more trees and vegetation along streets to provide natural cooling and shade.")

    if metrics.happiness < 40:
        tips.append("Low happiness: Add parks, entertainment venues, and improve services to boost community satisfaction.")
        tips.append("Create community spaces and mixed-use neighborhoods with easy access to amenities.")
    elif metrics.happiness < 70:
        tips.append("Community wellbeing: Add more recreational areas and ensure access to parks within walking distance of homes.")

    if metrics.traffic > 70:
        tips.append("Heavy traffic congestion: Create a comprehensive public transit network and improve road connectivity.")
        tips.append("Design compact, walkable neighborhoods with essential services within a 15-minute walk.")
    elif metrics.traffic > 40:
        tips.append("Moderate traffic: Improve your road network, add public transit, and create pedestrian-friendly zones.")

    # Zero means "not measured yet" for the social composites
    if 0 < metrics.education < 50:
        tips.append("Low education: Add schools and universities distributed throughout residential areas for equitable access.")

    if 0 < metrics.healthcare < 50:
        tips.append("Healthcare access: Add hospitals and clinics strategically placed to serve all neighborhoods equitably.")

    if 0 < metrics.economy < 50:
        tips.append("Economic development: Create innovation districts with mixed commercial, office, and research facilities.")
        tips.append("Balance industrial, commercial, and office spaces with good transportation connections.")

    tips.extend(GENERAL_TIPS)
    return tips


# ═══════════════════════════════════════════════════════════════════════════
# FUTURE PREDICTIONS
# ═══════════════════════════════════════════════════════════════════════════
def future_predictions(metrics: EnvironmentalMetrics) -> List[Prediction]:
    """Scenario forecasts; always at least MIN_PREDICTIONS entries."""
    predictions = []
    city_score = score(metrics)

    if metrics.emissions > 80:
        predictions.append(Prediction(
            "5 Years",
            "Air quality will continue to deteriorate, leading to increased respiratory health issues and regulatory penalties.",
            "negative",
        ))
    elif metrics.emissions < 30:
        predictions.append(Prediction(
            "5 Years",
            "Your city will become a model for clean air initiatives, attracting eco-conscious residents and businesses.",
            "positive",
        ))

    if metrics.water > 70:
        predictions.append(Prediction(
            "5 Years",
            "Water scarcity will become a recurring issue, requiring expensive infrastructure improvements.",
            "negative",
        ))
    elif metrics.water < 30:
        predictions.append(Prediction(
            "5 Years",
            "Efficient water systems will make your city resilient against drought conditions and reduce utility costs.",
            "positive",
        ))

    if metrics.heat > 60:
        predictions.append(Prediction(
            "15 Years",
            "Increasing urban temperatures will stress infrastructure and raise cooling costs substantially.",
            "negative",
        ))
    else:
        predictions.append(Prediction(
            "15 Years",
            "Your city's microclimate management will provide comfortable living conditions despite regional climate changes.",
            "positive",
        ))

    if metrics.happiness < 50:
        predictions.append(Prediction(
            "15 Years",
            "Population decline as residents seek better quality of life elsewhere, reducing tax base and economic activity.",
            "negative",
        ))
    elif metrics.happiness > 70:
        predictions.append(Prediction(
            "15 Years",
            "Strong community cohesion will drive civic participation and resilience against social challenges.",
            "positive",
        ))

    if city_score < 40:
        predictions.append(Prediction(
            "30 Years",
            "Your city will face significant challenges from climate change impacts, requiring costly adaptations and retrofits.",
            "negative",
        ))
    elif city_score > 75:
        predictions.append(Prediction(
            "30 Years",
            "Your city will be recognized as a global leader in sustainable urban development, creating economic and social benefits.",
            "positive",
        ))
    else:
        predictions.append(Prediction(
            "30 Years",
            "Your city will maintain moderate resilience to environmental challenges but will require ongoing improvements.",
            "neutral",
        ))

    if metrics.economy > 70 and metrics.education > 70:
        predictions.append(Prediction(
            "20 Years",
            "Your city will develop into an innovation hub, attracting talent and investment in sustainable technologies.",
            "positive",
        ))

    if metrics.healthcare > 70 and metrics.emissions < 40:
        predictions.append(Prediction(
            "25 Years",
            "Your city will report significantly better health outcomes and longevity than regional and national averages.",
            "positive",
        ))

    if len(predictions) < MIN_PREDICTIONS:
        if city_score > 60:
            predictions.append(Prediction(
                "10 Years",
                "Your city will adapt well to changing climate conditions with minimal disruption to daily life.",
                "positive",
            ))
        else:
            predictions.append(Prediction(
                "10 Years",
                "Your city will face increasing challenges from environmental stressors, requiring adaptive management.",
                "neutral",
            ))
        predictions.append(Prediction(
            "20 Years",
            "Community character will reflect your planning priorities, either strengthening or diminishing social bonds.",
            "positive" if city_score > 50 else "neutral",
        ))

    return predictions


# ═══════════════════════════════════════════════════════════════════════════
# PLACEMENT GUIDANCE
# ═══════════════════════════════════════════════════════════════════════════
CATEGORY_TIPS: Dict[Category, List[str]] = {
    Category.RESIDENTIAL: [
        "Residential buildings work well near parks and retail.",
        "Keep residential areas away from industrial zones.",
    ],
    Category.COMMERCIAL: [
        "Commercial buildings benefit from being near residential areas.",
        "Place retail near roads for better accessibility.",
    ],
    Category.INDUSTRIAL: [
        "Industrial buildings should be placed away from residential and educational areas.",
        "Consider placing industrial zones near power infrastructure.",
    ],
    Category.GREENSPACE: [
        "Parks improve happiness and reduce heat in surrounding areas.",
        "Strategically placed green spaces can offset pollution from other buildings.",
    ],
    Category.AGRICULTURAL: [
        "Farms should be placed away from dense urban development.",
        "Agricultural areas have low environmental impact.",
    ],
    Category.EDUCATIONAL: [
        "Schools and universities improve community happiness.",
        "Educational buildings work well near residential areas.",
    ],
    Category.HEALTHCARE: [
        "Hospitals provide essential services and increase happiness.",
        "Healthcare facilities should be accessible from residential areas.",
    ],
    Category.ENTERTAINMENT: [
        "Entertainment venues boost community happiness.",
        "These facilities work well near commercial and residential areas.",
    ],
}

# Infrastructure guidance depends on the specific building
INFRASTRUCTURE_TIPS: Dict[str, List[str]] = {
    "solar-farm": [
        "Renewable energy sources can be placed almost anywhere.",
        "Multiple renewable sources can significantly reduce city emissions.",
    ],
    "wind-farm": [
        "Renewable energy sources can be placed almost anywhere.",
        "Multiple renewable sources can significantly reduce city emissions.",
    ],
    "road": [
        "Roads connect different parts of the city.",
        "A good road network improves city efficiency.",
    ],
}


def compatibility_tips(catalog: BuildingCatalog, building_id: str) -> List[str]:
    """Placement advice for a building type; empty for unknown ids."""
    building = catalog.lookup(building_id)
    if building is None:
        return []

    if building.category == Category.INFRASTRUCTURE:
        tips = list(INFRASTRUCTURE_TIPS.get(building.id, []))
    else:
        tips = list(CATEGORY_TIPS.get(building.category, []))

    # Names in catalog declaration order
    excluded = [b.name for b in catalog if b.id in building.incompatible_with]
    if excluded:
        tips.append(f"Cannot be placed near: {', '.join(excluded)}")

    return tips


# ═══════════════════════════════════════════════════════════════════════════
# WEATHER GUIDANCE
# ═══════════════════════════════════════════════════════════════════════════
@dataclass
class DisasterRisk:
    """Natural disaster risk on a 0-100 scale per hazard."""
    flood: int
    heatwave: int
    storm: int
    overall: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


# Reported when no weather reading is available
DEFAULT_DISASTER_RISK = DisasterRisk(flood=10, heatwave=10, storm=10, overall=10)


def disaster_risk(reading: Optional[WeatherReading]) -> DisasterRisk:
    """Flood, heatwave and storm risk from current conditions."""
    if reading is None:
        return DEFAULT_DISASTER_RISK

    description = reading.description.lower()

    flood = 0
    if "rain" in description or "shower" in description:
        flood += 30
    if reading.humidity > 80:
        flood += 20

    heatwave = 0
    if reading.temperature > 30:
        heatwave += 50
    elif reading.temperature > 25:
        heatwave += 30
    if reading.humidity > 70:
        heatwave += 20

    storm = 0
    if reading.wind_speed > 15:
        storm += 40
    elif reading.wind_speed > 10:
        storm += 20
    if "thunderstorm" in description:
        storm += 50

    flood, heatwave, storm = min(100, flood), min(100, heatwave), min(100, storm)
    return DisasterRisk(flood=flood, heatwave=heatwave, storm=storm,
                        overall=max(flood, heatwave, storm))


def weather_recommendations(reading: WeatherReading, aqi: Optional[int] = None) -> List[str]:
    """
    Planning advice for current conditions.

    Args:
        reading: Current weather
        aqi: Air quality index, if a source is available
    """
    recommendations = []

    if reading.temperature > 30:
        recommendations.append("High temperatures detected. Consider adding more green spaces to reduce urban heat.")
        recommendations.append("Ensure buildings have adequate cooling systems or shade structures.")
    elif reading.temperature < 5:
        recommendations.append("Cold temperatures detected. Improve building insulation to reduce heating needs.")

    if reading.wind_speed > 15:
        recommendations.append("Strong winds detected. Wind farms would be highly effective in these conditions.")

    if aqi is not None:
        if aqi > 100:
            recommendations.append("Poor air quality detected. Consider adding more green spaces to filter air pollution.")
            recommendations.append("Reduce industrial activities or improve emission controls.")
        elif aqi > 50:
            recommendations.append("Moderate air quality. Adding parks can help improve air quality further.")

    recommendations.append("Balance residential, commercial, and green spaces for optimal city performance.")
    recommendations.append("Ensure adequate healthcare and educational facilities for your population.")
    return recommendations
