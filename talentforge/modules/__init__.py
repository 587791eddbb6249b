"""
Container for talentforge domain modules.

- talent_pkg: skill depot, talent modifiers, predicates, param references
- ability_pkg: ability data loading and the name hash index
- avatar_pkg: compiled avatar data, live avatars and teams
- persistence_pkg: stored avatar snapshots
"""
