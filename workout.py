import streamlit as st
import html
import logging
import plotly.graph_objects as go

import config
from journal import WorkoutStore, journal_frame, total_weight_moved
from storage import FileStorage

logging.basicConfig(level=config.log_level())
logger = logging.getLogger(__name__)

# =============================================================
# Page config
# =============================================================
st.set_page_config(
    page_title="Gym Journal",
    page_icon="🏋️",
    layout="centered",
    initial_sidebar_state="collapsed",
)

# =============================================================
# Compatibility helpers (Streamlit versions)
# =============================================================

def safe_rerun():
    if hasattr(st, "rerun"):
        st.rerun()
    elif hasattr(st, "experimental_rerun"):
        st.experimental_rerun()


def safe_toast(msg: str):
    if hasattr(st, "toast"):
        st.toast(msg)
    else:
        st.info(msg)

# =============================================================
# Global styles
# =============================================================
st.markdown(
    """
    <style>
      :root { --radius: 10px; --muted:#64748b; --card:#ffffff; --line:#E5E7EB; }

      .block-container { max-width: 720px !important; }
      .main-title { text-align:center; margin: 16px 0 6px 0; }
      .section-head { margin: 24px 0 10px; font-weight: 800; font-size: 1.05rem; }

      .stButton>button { width: 100%; padding: 14px 16px; border-radius: var(--radius); font-weight: 700; margin: 4px 0; }

      .day-card { background: var(--card); border-radius: var(--radius); padding: 8px 16px; margin-bottom: 20px; box-shadow: 0 2px 4px rgba(0,0,0,0.25); }
      .day-card h4 { margin: 4px 0 8px 0; }
      .set-row, .total-row { display:flex; justify-content:space-between; gap:10px; }
      .set-row .detail { color: var(--muted); }
      .total-row { border-top: 1px solid var(--line); margin-top: 8px; padding-top: 8px; font-weight: 700; }

      @media (prefers-color-scheme: dark) {
        :root { --card:#0B1220; --line:#263041; }
      }
    </style>
    """,
    unsafe_allow_html=True,
)

# =============================================================
# Store (one per data dir, shared by every session) + Session State
# =============================================================
@st.cache_resource(show_spinner=False)
def get_store(data_dir: str, tz_name: str) -> WorkoutStore:
    store = WorkoutStore(FileStorage(data_dir), tz=config.resolve_timezone(tz_name))
    store.load()
    return store


store = get_store(config.data_dir(), config.timezone_name())

if "selected_exercise" not in st.session_state:
    st.session_state.selected_exercise = None

# =============================================================
# Formatting helpers
# =============================================================

def format_day(workout):
    d = workout.date.astimezone(store.tz)
    return f"{d:%b} {d.day}, {d.year}"


def render_day_card(workout):
    rows = "".join(
        f"<div class='set-row'><strong>{html.escape(s.exercise)}:</strong>"
        f"<span class='detail'>{s.reps} reps @ {s.weight} lbs</span></div>"
        for s in workout.sets
    )
    st.markdown(
        f"<div class='day-card'><h4>{format_day(workout)}</h4>{rows}"
        f"<div class='total-row'><span>Total Weight Moved:</span>"
        f"<span>{total_weight_moved(workout)} lbs</span></div></div>",
        unsafe_allow_html=True,
    )


def volume_chart(workouts):
    df = journal_frame(workouts, store.tz)
    fig = go.Figure(go.Bar(x=df["date"], y=df["total_weight"], name="Total weight"))
    fig.update_layout(title="Total Weight Moved per Day", xaxis_title="Date", yaxis_title="lbs", height=300)
    st.plotly_chart(fig, use_container_width=True)

# =============================================================
# Header
# =============================================================
st.markdown("<h1 class='main-title'>🏋️ Gym Journal</h1>", unsafe_allow_html=True)

workout_tab, journal_tab = st.tabs(["⚡ Workout", "📖 Journal"])

# =============================================================
# Workout tab
# =============================================================
with workout_tab:
    exercise = st.session_state.selected_exercise
    if exercise is None:
        st.markdown("<div class='section-head'>Workout</div>", unsafe_allow_html=True)
        for name in config.EXERCISES:
            if st.button(name, key=f"pick_{name}"):
                st.session_state.selected_exercise = name
                safe_rerun()
    else:
        st.subheader(exercise)
        reps = st.number_input(
            "Reps",
            min_value=config.REPS_RANGE[0],
            max_value=config.REPS_RANGE[1],
            value=config.DEFAULT_REPS,
            step=1,
            key="reps_input",
        )
        weight_options = list(range(config.WEIGHT_RANGE[0], config.WEIGHT_RANGE[1] + 1))
        weight = st.selectbox(
            "Weight",
            weight_options,
            index=weight_options.index(config.DEFAULT_WEIGHT),
            format_func=lambda w: f"{w} lbs",
            key="weight_input",
        )

        c1, c2 = st.columns(2)
        with c1:
            if st.button("Save Set", key="save_set"):
                store.record_set(exercise, int(reps), int(weight))
                logger.info("Logged %s: %d reps @ %d lbs", exercise, reps, weight)
                st.session_state.selected_exercise = None
                safe_toast(f"Saved {exercise}.")
                safe_rerun()
        with c2:
            if st.button("Cancel", key="cancel_set"):
                st.session_state.selected_exercise = None
                safe_rerun()

# =============================================================
# Journal tab
# =============================================================
with journal_tab:
    st.markdown("<div class='section-head'>Journal</div>", unsafe_allow_html=True)
    workouts = store.current_workouts()
    if len(workouts) == 0:
        st.info("No workouts logged yet.")
    else:
        for w in workouts:
            render_day_card(w)
        volume_chart(workouts)
