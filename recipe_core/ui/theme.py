import streamlit as st

# === COLOR PALETTE ===
PRIMARY_COLOR    = "#ea7a2f"
SECONDARY_COLOR  = "#c2410c"
SUCCESS_COLOR    = "#10b981"
WARNING_COLOR    = "#f59e0b"
DANGER_COLOR     = "#ef4444"
TEXT_COLOR       = "#2c3e50"
SUBTLE_TEXT      = "#495057"
GRID_COLOR       = "#e5e7eb"
BACKGROUND_COLOR = "#fffaf5"
CARD_BG_LIGHT    = "#ffffff"

# Card image heights per view mode
CARD_IMAGE_HEIGHT = {"large": 260, "medium": 180}


def apply_css():
    """Global styles for the catalog pages."""
    st.markdown(f"""
        <style>
        .main {{
            background-color: {BACKGROUND_COLOR};
            color: {TEXT_COLOR};
            font-family: 'Segoe UI','Inter','SF Pro Display',sans-serif;
        }}
        .main-header {{
            background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, {SECONDARY_COLOR} 100%);
            padding: 2rem; border-radius: 16px; margin-bottom: 2rem;
            border: 1px solid rgba(255,255,255,0.1); box-shadow: 0 8px 32px rgba(234,122,47,.3);
        }}
        .recipe-card {{
            background: {CARD_BG_LIGHT}; padding: 1rem; border-radius: 14px; margin: .5rem 0;
            border: 1px solid {GRID_COLOR}; box-shadow: 0 4px 8px rgba(0,0,0,0.06);
        }}
        .recipe-card img {{ width: 100%; object-fit: cover; border-radius: 10px; }}
        .recipe-card h4 {{ margin: .6rem 0 .2rem 0; }}
        .recipe-meta {{ color: {SUBTLE_TEXT}; font-size: .85rem; }}
        .status-badge {{
            display: inline-block; padding: .2rem .7rem; border-radius: 999px;
            font-size: .8rem; font-weight: 600; color: white;
        }}
        .step-done {{ color: #9ca3af; text-decoration: line-through; }}
        .step-current {{ font-weight: 600; color: {TEXT_COLOR}; }}
        .timer-display {{ font-size: 2rem; font-weight: 700; font-variant-numeric: tabular-nums; }}
        .stButton button {{
            background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, {SECONDARY_COLOR} 100%);
            color: white; border: none; border-radius: 10px; padding: .48rem 1.2rem; font-weight: 600;
            transition: all .3s ease; cursor: pointer;
        }}
        .stButton button:hover {{ transform: translateY(-2px); box-shadow: 0 6px 20px rgba(234,122,47,.3); }}
        .stButton button:disabled {{ background: #ced4da; color: #6c757d; cursor: not-allowed; opacity: 0.65; }}
        h1,h2,h3,h4,h5,h6 {{ color: {TEXT_COLOR}; font-weight: 600; }}
        h3 {{ color: {PRIMARY_COLOR}; }}
        [data-testid="stSidebar"] {{ background-color: {CARD_BG_LIGHT}; border-right: 1px solid {GRID_COLOR}; }}
        </style>
    """, unsafe_allow_html=True)
