"""Simple entrypoint to run the outfit matcher locally against sample data."""

from matcher_app.app import OutfitMatcherApp
from matcher_app.config import MatcherConfig
from models.garment import Garment, MatchingContext, WeatherContext
from tools.classifier_gateway import StaticGarmentClassifier


def sample_wardrobe() -> list[Garment]:
    return [
        Garment(role="top", name="White oxford shirt", color_primary="#FFFFFF", material="cotton",
                occasions=["business", "casual"], formality_score=6),
        Garment(role="top", name="Navy wool sweater", color_primary="navy", material="wool",
                occasions=["casual"], formality_score=4),
        Garment(role="bottom", name="Grey trousers", color_primary="#808080", material="wool",
                occasions=["business"], formality_score=7),
        Garment(role="bottom", name="Blue jeans", color_primary="#0000FF", material="denim",
                occasions=["casual"], formality_score=3),
    ]


def main() -> None:
    app = OutfitMatcherApp(config=MatcherConfig.from_env(), classifier=StaticGarmentClassifier())
    context = MatchingContext(occasion="business", weather=WeatherContext(temperature_f=45.0, description="overcast"))
    for pairing in app.generate(sample_wardrobe(), context):
        print(f"{pairing.confidence:.2f}  {pairing.top.label} + {pairing.bottom.label}: {pairing.reasoning}")


if __name__ == "__main__":
    main()
