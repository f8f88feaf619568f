import streamlit as st
import requests

from jobmatch.config import BACKEND_URL
from jobmatch.models import JobRecommendation, ResumeAnalysis
from jobmatch.session_store import MappingStore, SessionStore

# Long enough for analyze + recommend + five spaced score calls.
ANALYZE_TIMEOUT_SECONDS = 600

st.set_page_config(page_title="JobMatch", layout="wide")

session = SessionStore(MappingStore(st.session_state))


def backend_error(response: requests.Response) -> str:
    try:
        return response.json().get("error") or response.reason
    except ValueError:
        return response.text or response.reason


def sign_in_page():
    st.title("🔐 Sign in to JobMatch")
    with st.form("signin"):
        email = st.text_input("Email", placeholder="Enter your email")
        password = st.text_input("Password", type="password", placeholder="Enter your password")
        submitted = st.form_submit_button("Sign in")
    if submitted:
        if session.sign_in(email, password):
            st.rerun()
        else:
            st.error("Please fill in all fields")


def upload_page():
    st.title("📄 JobMatch")
    st.markdown("### Find Your Perfect Career Match")

    uploaded_file = st.file_uploader("Upload your resume (PDF or .docx)", type=["pdf", "docx"])
    if not uploaded_file:
        st.info("Please upload a resume to begin.")
        return

    if not st.button("Analyze Resume"):
        return

    with st.spinner("Uploading and analyzing your resume... Please wait ⏳"):
        try:
            files = {"resume": (uploaded_file.name, uploaded_file, uploaded_file.type)}
            upload = requests.post(f"{BACKEND_URL}/upload", files=files)
            if upload.status_code != 200:
                st.error(f"❌ Upload failed: {backend_error(upload)}")
                return

            resume = requests.get(f"{BACKEND_URL}/resume")
            if resume.status_code != 200:
                st.error(f"❌ Failed to get resume data: {backend_error(resume)}")
                return
            resume_data = resume.json()
            if not resume_data.get("text"):
                st.error("❌ No text content found in the resume")
                return

            st.subheader("📊 Parsed Resume Data")
            st.json({k: v for k, v in resume_data.items() if k != "text"})

            analysis = requests.post(
                f"{BACKEND_URL}/resume/analyze",
                json={"resumeText": resume_data["text"]},
                timeout=ANALYZE_TIMEOUT_SECONDS,
            )
            if analysis.status_code != 200:
                st.error(f"❌ Analysis failed: {backend_error(analysis)}")
                return
        except requests.RequestException as e:
            st.error(f"Error: {e}")
            return

    data = analysis.json()
    session.set_resume_analysis(ResumeAnalysis.model_validate(data["resumeAnalysis"]))
    session.set_job_recommendations(
        [JobRecommendation.model_validate(job) for job in data.get("jobRecommendations", [])]
    )
    st.success("✅ Resume analyzed successfully! Open the other pages from the sidebar.")


def analysis_page():
    st.title("🧾 Resume Analysis")
    analysis = session.get_resume_analysis()
    if analysis is None:
        st.warning("No resume data found. Please upload your resume first.")
        return

    st.write(f"**Name:** {analysis.name or '—'}")
    st.write(f"**Email:** {analysis.email or '—'}")
    st.write(f"**Phone:** {analysis.phone or '—'}")

    st.subheader("🎓 Education")
    for edu in analysis.education:
        st.write(f"- {edu.degree} — {edu.institution} ({edu.year})")

    st.subheader("💼 Experience")
    for exp in analysis.experience:
        st.write(f"**{exp.position}** at {exp.company} ({exp.duration})")
        if exp.description:
            st.caption(exp.description)

    if analysis.skills:
        st.subheader("🛠️ Skills")
        st.write(", ".join(analysis.skills))


def recommendations_page():
    st.title("🎯 Job Recommendations")
    recommendations = session.get_job_recommendations()
    if not recommendations:
        st.warning("No recommendations yet. Analyze a resume first.")
        return

    for job in recommendations:
        with st.expander(f"{job.job_title} — match {job.match_score:.0f}%"):
            st.write(job.reasoning)
            if job.required_skills:
                st.write("**✅ Skills you have:**", ", ".join(job.required_skills))
            if job.missing_skills:
                st.write("**⚠️ Skills to develop:**", ", ".join(job.missing_skills))

            score = job.threshold_score
            if score is None:
                continue
            col1, col2, col3 = st.columns(3)
            col1.metric("Overall score", f"{score.overall_score:.0f}")
            col2.metric("Selection", f"{score.selection_percentage:.0f}%")
            col3.metric("Rejection", f"{score.rejection_percentage:.0f}%")
            metrics = score.bar_graph_metrics
            st.bar_chart(
                {
                    "Metric": ["Skills", "Experience", "Education", "Overall"],
                    "Score": [
                        metrics.skill_match,
                        metrics.experience_match,
                        metrics.education_match,
                        metrics.overall_match,
                    ],
                },
                x="Metric",
                y="Score",
            )
            if score.detailed_analysis:
                st.write(score.detailed_analysis)


def job_matches_page():
    st.title("🔎 Job Matches")
    try:
        response = requests.get(f"{BACKEND_URL}/job-matches")
    except requests.RequestException as e:
        st.error(f"Error: {e}")
        return
    if response.status_code != 200:
        st.error(f"❌ Failed to fetch job matches: {backend_error(response)}")
        return

    jobs = response.json()
    if not jobs:
        st.info("No matching jobs yet. Upload a resume first.")
    for job in jobs:
        st.write(f"**{job['title']}** at {job['company']} ({job['location']}) — {job['matchPercentage']}% match")
        st.caption(job["description"])


def skill_enhancement_page():
    st.title("📈 Skill Enhancement")
    try:
        response = requests.get(f"{BACKEND_URL}/skill-tips")
        response.raise_for_status()
    except requests.RequestException as e:
        st.error(f"Error: {e}")
        return

    for tip in response.json():
        st.subheader(f"{tip['category']}: {tip['title']}")
        st.write(tip["description"])
        for resource in tip["resources"]:
            st.write(f"- {resource}")


PAGES = {
    "Upload": upload_page,
    "Resume Analysis": analysis_page,
    "Job Recommendations": recommendations_page,
    "Job Matches": job_matches_page,
    "Skill Enhancement": skill_enhancement_page,
}

if not session.is_logged_in():
    sign_in_page()
else:
    choice = st.sidebar.radio("Navigate", list(PAGES))
    if st.sidebar.button("Logout"):
        session.clear_user()
        st.rerun()
    PAGES[choice]()
