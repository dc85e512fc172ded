"""Recycling Points Map - Find recycling drop-off points and keep favorites.

A Streamlit map viewer over a real-time Firestore collection featuring:
- Live mirror of the recycling point collection and the user's favorites
- Material filters derived from the points currently known
- Favorite toggling written back to the remote store
- Session-gated subscriptions that never leak data across users

Modules:
    model: Data structures (RecyclingPoint, FavoriteMark, Session, commands, events)
    core: Reactive core (state store, derived view, favorites, subscriptions)
    ui: Streamlit interface components (state machine, map, panels)

Example:
    from recycling_map.core import LocalStateStore, DerivedViewEngine
    from recycling_map.model import RecyclingPoint
"""
