from dataclasses import dataclass

@dataclass(slots=True)
class FlavorRegistry:
    """Empty tag component marking the single entity that stores the flavor progression.

    The same entity carries a Flavors component with names and colors per rank.
    """
    pass
