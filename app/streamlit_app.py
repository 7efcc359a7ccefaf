from __future__ import annotations

import json
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pandas as pd
import streamlit as st
from pydantic import ValidationError

# Ensure project root on path
CURRENT_DIR = Path(__file__).resolve().parent
ROOT_DIR = CURRENT_DIR.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from duration import calculate_study_days, calculate_total_study_time  # type: ignore  # noqa: E402
from metrics import build_saved_simulation, result_to_dict, summarize_results  # type: ignore  # noqa: E402
from models import Subject  # type: ignore  # noqa: E402
from models_pydantic import StudyPlanInput, SubjectInput  # type: ignore  # noqa: E402
from simulation import STRATEGY_DESCRIPTIONS, run_simulation  # type: ignore  # noqa: E402
from storage import (  # type: ignore  # noqa: E402
    LocalStore,
    load_saved_simulation,
    load_study_plan,
    load_subjects,
    save_simulation,
    save_study_plan,
    save_subjects,
)

STORE_PATH = ROOT_DIR / ".study_store.json"
SUBJECT_COLUMNS = ["id", "name", "totalLoad", "loadUnit", "studySpeedPerPage", "priority", "targetRounds"]

st.set_page_config(page_title="Study Round Simulator", layout="wide")


# ----------------------- Session State ----------------------- #
def init_session_state() -> None:
    if "store" not in st.session_state:
        st.session_state["store"] = LocalStore(STORE_PATH)
    store: LocalStore = st.session_state["store"]
    if "plan" not in st.session_state:
        st.session_state["plan"] = load_study_plan(store)
    if "subjects" not in st.session_state:
        st.session_state["subjects"] = load_subjects(store)
    if "results" not in st.session_state:
        st.session_state["results"] = []


init_session_state()


# ----------------------- Helpers ----------------------- #
def subjects_to_df(subjects: List[Subject]) -> pd.DataFrame:
    rows = [
        {
            "id": s.id,
            "name": s.name,
            "totalLoad": s.total_load,
            "loadUnit": s.load_unit,
            "studySpeedPerPage": s.study_speed_per_page,
            "priority": s.priority,
            "targetRounds": s.target_rounds,
        }
        for s in subjects
    ]
    return pd.DataFrame(rows, columns=SUBJECT_COLUMNS)


def subjects_from_df(df: pd.DataFrame) -> Tuple[List[Subject], List[str]]:
    subjects: List[Subject] = []
    errors: List[str] = []
    for idx, row in df.iterrows():
        record: Dict[str, Any] = {k: v for k, v in row.to_dict().items() if not pd.isna(v)}
        if not record.get("id"):
            record.pop("id", None)
        try:
            subjects.append(SubjectInput.model_validate(record).to_domain())
        except ValidationError as exc:
            messages = "; ".join(err["msg"] for err in exc.errors())
            errors.append(f"Row {idx + 1}: {messages}")
    return subjects, errors


def results_to_df(results) -> pd.DataFrame:
    return pd.DataFrame([result_to_dict(r) for r in results])


# ----------------------- Sidebar ----------------------- #
st.sidebar.header("Strategy")
strategy = st.sidebar.selectbox("Allocation strategy", list(STRATEGY_DESCRIPTIONS.keys()))
st.sidebar.caption(STRATEGY_DESCRIPTIONS[strategy])

tabs = st.tabs(["Study Plan", "Subjects", "Simulation", "Saved Result"])

# ----------------------- Tab 1: Study Plan ----------------------- #
with tabs[0]:
    st.header("Study Plan")
    plan = st.session_state["plan"]
    with st.form(key="plan_form"):
        exam_name = st.text_input("Exam name", value=plan.exam_name if plan else "")
        col1, col2 = st.columns(2)
        start_val = col1.date_input(
            "Study start", value=plan.study_start_date.date() if plan else date.today())
        end_val = col2.date_input(
            "Study end", value=plan.study_end_date.date() if plan else date.today() + timedelta(days=30))
        daily_hours = st.number_input(
            "Daily study hours", min_value=0.0, max_value=24.0,
            value=float(plan.daily_study_hours) if plan else 4.0, step=0.5)
        submitted = st.form_submit_button("Save plan", use_container_width=True)

    if submitted:
        try:
            new_plan = StudyPlanInput(
                examName=exam_name,
                studyStartDate=start_val,
                studyEndDate=end_val,
                dailyStudyHours=daily_hours,
            ).to_domain()
        except ValidationError as exc:
            st.error("Validation errors:")
            for err in exc.errors():
                st.write(f"- {err['msg']}")
        else:
            st.session_state["plan"] = new_plan
            save_study_plan(st.session_state["store"], new_plan)
            st.success("Study plan saved.")

# ----------------------- Tab 2: Subjects ----------------------- #
with tabs[1]:
    st.header("Subjects")
    st.caption("Add one row per subject. Speed is minutes per unit of load.")
    edited_df = st.data_editor(
        subjects_to_df(st.session_state["subjects"]),
        num_rows="dynamic",
        hide_index=True,
        column_config={
            "id": st.column_config.TextColumn("Id", disabled=True),
            "name": st.column_config.TextColumn("Subject", required=True),
            "totalLoad": st.column_config.NumberColumn("Load", min_value=0),
            "loadUnit": st.column_config.TextColumn("Unit"),
            "studySpeedPerPage": st.column_config.NumberColumn("Min / unit", min_value=0),
            "priority": st.column_config.NumberColumn("Priority", min_value=1, max_value=5, step=1),
            "targetRounds": st.column_config.NumberColumn("Target rounds", min_value=1, step=1),
        },
        key="subjects_editor",
        use_container_width=True,
    )
    if st.button("Save subjects", key="save_subjects_btn"):
        subjects, errors = subjects_from_df(edited_df)
        if errors:
            st.error("Fix these rows first:")
            for err in errors:
                st.write(f"- {err}")
        else:
            st.session_state["subjects"] = subjects
            save_subjects(st.session_state["store"], subjects)
            st.success(f"Saved {len(subjects)} subject(s).")

# ----------------------- Tab 3: Simulation ----------------------- #
with tabs[2]:
    st.header("Simulation")
    plan = st.session_state["plan"]
    subjects = st.session_state["subjects"]
    if not plan:
        st.info("Save a study plan first.")
    elif not subjects:
        st.info("Add subjects first.")
    else:
        study_days = calculate_study_days(plan.study_start_date, plan.study_end_date)
        cols = st.columns(3)
        cols[0].metric("Study period", f"{study_days} days")
        cols[1].metric("Available hours", f"{calculate_total_study_time(study_days, plan.daily_study_hours):.1f}")
        cols[2].metric("Subjects", len(subjects))

        results = run_simulation(plan, subjects, strategy)
        st.session_state["results"] = results
        summary = summarize_results(results)

        result_df = results_to_df(results)
        st.subheader("Rounds per subject")
        st.bar_chart(result_df.set_index("subjectName")["rounds"])
        st.dataframe(
            result_df[["subjectName", "rounds", "targetRounds", "achievementRate"]],
            hide_index=True,
            use_container_width=True,
            column_config={
                "rounds": st.column_config.NumberColumn("Rounds", format="%.1f"),
                "achievementRate": st.column_config.ProgressColumn(
                    "Achievement", format="%.0f%%", min_value=0, max_value=100),
            },
        )

        summary_cols = st.columns(3)
        summary_cols[0].metric("Overall achievement", f"{summary.total_achievement_rate:.1f}%")
        summary_cols[1].metric("Best subject", summary.best_subject)
        summary_cols[2].metric("Needs attention", summary.worst_subject)

        if st.button("Save result", type="primary", key="save_result_btn"):
            saved = build_saved_simulation(strategy, results, plan, subjects)
            if save_simulation(st.session_state["store"], saved):
                st.success("Simulation result saved.")
            else:
                st.error("Could not write the local store.")

# ----------------------- Tab 4: Saved Result ----------------------- #
with tabs[3]:
    st.header("Saved Result")
    saved_payload = load_saved_simulation(st.session_state["store"])
    if not saved_payload:
        st.info("No saved simulation yet.")
    else:
        timestamp = saved_payload.get("timestamp")
        if isinstance(timestamp, datetime):
            timestamp = timestamp.strftime("%Y-%m-%d %H:%M")
        st.caption(f"Strategy: {saved_payload.get('strategy', '-')} · saved {timestamp}")
        cols = st.columns(3)
        cols[0].metric("Overall achievement", f"{saved_payload.get('totalAchievementRate', 0):.1f}%")
        cols[1].metric("Best subject", saved_payload.get("bestSubject", "-"))
        cols[2].metric("Worst subject", saved_payload.get("worstSubject", "-"))
        st.dataframe(pd.DataFrame(saved_payload.get("results", [])), hide_index=True, use_container_width=True)
        st.download_button(
            label="Download saved result",
            data=json.dumps(saved_payload, indent=2, ensure_ascii=False, default=str),
            file_name="saved_simulation.json",
            mime="application/json",
        )
