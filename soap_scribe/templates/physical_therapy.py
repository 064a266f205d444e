"""Physical therapy templates (PT only; chiropractors get their own set)."""

from typing import Any

from soap_scribe.templates.models import Profession, TemplateCategory, TemplateDefinition
from soap_scribe.templates.schema import (
    billing_section,
    categorized_table,
    composite,
    list_section,
    table,
    wysiwyg,
)

PT_RESULTS = ["Positive", "Negative", "Not Tested", "WNL", "Limited", "Painful", "3/5", "4/5", "5/5"]


def _pt_assessment(medical_necessity: bool = True, short_term: str = "", long_term: str = "") -> dict[str, Any]:
    fields = {
        "clinical_impression": wysiwyg(
            "Clinical reasoning, diagnosis, contributing factors, prognosis..."
        ),
    }
    if medical_necessity:
        fields["medical_necessity"] = wysiwyg(
            "Why PT is needed: functional limitations, safety concerns, impact on ADLs..."
        )
    fields["short_term_goals"] = list_section(
        short_term or "SMART goals for 2-4 weeks (Specific, Measurable, Achievable, Relevant, Time-bound)"
    )
    fields["long_term_goals"] = list_section(long_term or "SMART goals for 6-12 weeks")
    return composite(**fields)


def _pt_plan(interventions: str) -> dict[str, Any]:
    return composite(
        interventions=list_section(interventions),
        progressions=list_section("How to advance exercises as patient improves..."),
        regressions=list_section("How to modify if symptoms increase..."),
        frequency_duration=wysiwyg("Treatment frequency, session duration, expected timeline..."),
        patient_education=wysiwyg("Home exercise program, activity modifications, precautions..."),
    )


def _evaluation(
    key: str,
    name: str,
    region_label: str,
    description: str,
    subjective: str,
    categories: dict[str, list[str]],
    focus: list[str],
    common_results: list[str] = PT_RESULTS,
    medical_necessity: bool = True,
    billing: bool = True,
    **assessment_kwargs: str,
) -> TemplateDefinition:
    sections: dict[str, Any] = {
        "subjective": wysiwyg(subjective),
        "objective": categorized_table(
            categories,
            headers=["Test/Measurement", "Result", "Notes"],
            common_results=common_results,
        ),
        "assessment": _pt_assessment(medical_necessity, **assessment_kwargs),
        "plan": _pt_plan(f"{region_label.capitalize()}-specific interventions..."),
    }
    if billing:
        sections["billing"] = billing_section()

    return TemplateDefinition(
        key=key,
        name=name,
        profession=Profession.PHYSICAL_THERAPY,
        category=TemplateCategory.BODY_PART,
        session_type="evaluation",
        body_region=key,
        description=description,
        role=f"You are a physical therapist documenting a {region_label} evaluation.",
        focus=focus,
        sections=sections,
    )


DAILY_NOTE = TemplateDefinition(
    key="daily-note",
    name="Daily Note",
    profession=Profession.PHYSICAL_THERAPY,
    category=TemplateCategory.UNIVERSAL,
    session_type="follow-up",
    description="Routine follow-up visit documentation",
    role="You are a physical therapy documentation assistant writing a Daily Note for a routine follow-up visit.",
    focus=[
        "Focus on progress since last visit",
        "Document response to treatment",
        "Update goals if needed",
        "Include objective measurements when mentioned",
        "Be concise but thorough",
    ],
    sections={
        "subjective": wysiwyg(
            "Patient reports, symptoms, progress since last visit, pain levels, functional changes...",
            label="Subjective",
        ),
        "objective": composite(
            label="Objective",
            observations=wysiwyg(
                "Clinical observations, gait, posture, movement quality...", label="Observations"
            ),
            measurements=table(label="Measurements"),
        ),
        "assessment": composite(
            label="Assessment",
            clinical_impression=wysiwyg("Progress, clinical reasoning, response to treatment..."),
            medical_necessity=wysiwyg(
                "Why continued PT is needed: ongoing deficits, functional limitations, safety concerns..."
            ),
            short_term_goals=list_section(
                "SMART goals for next 1-2 weeks (Specific, Measurable, Achievable, Relevant, Time-bound)"
            ),
            long_term_goals=list_section("SMART goals for 4-6 weeks"),
        ),
        "plan": composite(
            label="Plan",
            interventions=wysiwyg(
                "Treatment provided today, exercises, modalities, manual therapy...", label="Interventions"
            ),
            home_program=wysiwyg(
                "Home exercises, activity modifications, self-care instructions...",
                label="Home Exercise Program",
            ),
            frequency=wysiwyg("Treatment frequency and duration"),
        ),
        "billing": composite(
            cpt_codes=list_section("CPT codes for this session"),
            units=wysiwyg("Time-based units (1 unit = 15 min)"),
            icd10_codes=list_section("ICD-10 diagnosis codes"),
        ),
    },
)

DISCHARGE = TemplateDefinition(
    key="discharge",
    name="Discharge Note",
    profession=Profession.PHYSICAL_THERAPY,
    category=TemplateCategory.UNIVERSAL,
    session_type="discharge",
    description="Final visit and discharge summary",
    role="You are a physical therapy documentation assistant writing a Discharge Note for the final visit.",
    focus=[
        "Summarize the entire episode of care",
        "Compare initial to discharge status for every measurement",
        "Document goal achievement",
        "Provide clear discharge instructions and prevention strategies",
    ],
    sections={
        "subjective": wysiwyg(
            "Patient reports at discharge, final symptoms, functional status, satisfaction with care...",
            label="Subjective",
        ),
        "objective": composite(
            label="Objective",
            observations=wysiwyg(
                "Final clinical observations, functional abilities...", label="Final Observations"
            ),
            measurements=table(
                label="Discharge Measurements",
                headers=["Test/Measurement", "Initial", "Discharge", "Change"],
                columns=("test", "initial", "discharge", "change"),
            ),
        ),
        "assessment": composite(
            label="Assessment",
            clinical_impression=wysiwyg(
                "Overall progress, goal achievement, functional outcomes, reason for discharge...",
                label="Discharge Summary",
            ),
            goals_achieved=list_section(label="Goals Achieved"),
            goals_partially_met=list_section(label="Goals Partially Met"),
        ),
        "plan": composite(
            label="Plan",
            discharge_instructions=wysiwyg(
                "Home exercise program, activity guidelines, precautions, return to sport/work recommendations...",
                label="Discharge Instructions",
            ),
            follow_up=wysiwyg(
                "Return to PT if needed, physician follow-up, maintenance program...",
                label="Follow-Up Recommendations",
            ),
            prognosis=wysiwyg(
                "Expected long-term outcomes, risk factors, prevention strategies...",
                label="Long-Term Prognosis",
            ),
        ),
    },
)

KNEE = _evaluation(
    key="knee",
    name="Knee Evaluation",
    region_label="knee",
    description="Comprehensive knee assessment including ligament tests and ROM",
    subjective="Patient history, pain description, functional limitations...",
    categories={
        "Observation": ["Knee Effusion/Swelling", "Gait Pattern"],
        "Palpation": ["Joint Line Tenderness", "Patellar Tendon"],
        "Range of Motion": ["Knee Flexion", "Knee Extension"],
        "Strength Testing": ["Quadriceps Strength", "Hamstring Strength"],
        "Special Tests": [
            "McMurray's Test",
            "Lachman's Test",
            "Valgus/Varus Stress",
            "Patellar Mobility",
        ],
        "Functional Testing": ["Single Leg Stance", "Squat Assessment"],
    },
    focus=[
        "Focus on knee-specific assessments and findings (ligamentous, meniscal, patellofemoral)",
        "Be specific about knee pathology in the clinical impression",
    ],
)

SHOULDER = _evaluation(
    key="shoulder",
    name="Shoulder Evaluation",
    region_label="shoulder",
    description="Shoulder impingement, rotator cuff, and mobility assessment",
    subjective="Patient history, pain description, mechanism of injury, functional limitations...",
    categories={
        "Observation": ["Posture Assessment", "Shoulder Height Symmetry"],
        "Palpation": ["AC Joint", "Subacromial Space", "Biceps Tendon"],
        "Range of Motion": [
            "Shoulder Flexion",
            "Shoulder Abduction",
            "Internal Rotation",
            "External Rotation",
        ],
        "Strength Testing": ["Rotator Cuff Strength", "Scapular Stabilizers"],
        "Special Tests": ["Hawkins-Kennedy Test", "Neer's Test", "Empty Can Test", "Drop Arm Test"],
        "Functional Testing": ["Overhead Reach", "Behind-Back Reach"],
    },
    focus=[
        "Focus on shoulder-specific findings: impingement, rotator cuff integrity, scapular mechanics",
        "Document overhead and behind-back functional limitations",
    ],
)

BACK = _evaluation(
    key="back",
    name="Back Evaluation",
    region_label="back",
    description="Spinal assessment including posture and movement analysis",
    subjective="Patient history, pain description, radiation patterns, functional limitations...",
    categories={
        "Observation": ["Posture Assessment", "Spinal Alignment", "Gait Pattern"],
        "Palpation": ["Paraspinal Tenderness", "SI Joint", "Trigger Points"],
        "Range of Motion": ["Lumbar Flexion", "Lumbar Extension", "Lateral Flexion", "Rotation"],
        "Strength Testing": ["Core Strength", "Hip Flexors", "Gluteals"],
        "Special Tests": ["SLR Test", "FABER Test", "Centralization/Peripheralization"],
        "Functional Testing": ["Sit-to-Stand", "Forward Bending", "Lifting Mechanics"],
    },
    focus=[
        "Focus on spinal findings: radiation patterns, directional preference, neural tension",
        "Note centralization or peripheralization of symptoms with repeated movements",
    ],
    common_results=[
        "Positive", "Negative", "Not Tested", "WNL", "Limited", "Painful", "Centralizes", "Peripheralizes",
    ],
    medical_necessity=False,
    billing=False,
    short_term="Goals for 2-4 weeks (e.g., Reduce pain to 3/10, Improve lumbar flexion ROM)",
    long_term="Goals for 6-12 weeks (e.g., Return to work without restrictions, Independent with HEP)",
)

NECK = _evaluation(
    key="neck",
    name="Neck Evaluation",
    region_label="neck",
    description="Cervical spine mobility and neurological screening",
    subjective="Patient history, pain description, headaches, neurological symptoms, functional limitations...",
    categories={
        "Observation": ["Posture (Forward Head)", "Shoulder Height", "Muscle Bulk"],
        "Palpation": ["Cervical Paraspinals", "Upper Trapezius", "SCM", "Facet Joints"],
        "Range of Motion": [
            "Cervical Flexion",
            "Cervical Extension",
            "Lateral Flexion (Left)",
            "Lateral Flexion (Right)",
            "Rotation (Left)",
            "Rotation (Right)",
        ],
        "Strength Testing": ["Deep Neck Flexors", "Upper Trapezius", "Levator Scapulae"],
        "Special Tests": [
            "Spurling's Test",
            "Distraction Test",
            "Upper Limb Tension Test",
            "Vertebral Artery Test",
        ],
        "Functional Testing": ["Cervical Endurance", "Posture Holding", "Neurological Screen"],
    },
    focus=[
        "Focus on cervical mobility, headaches and neurological screening findings",
        "Document any radicular symptoms with dermatomal distribution",
    ],
    common_results=["Positive", "Negative", "Not Tested", "WNL", "Limited", "Painful", "Forward Head", "Normal"],
)

HIP = _evaluation(
    key="hip",
    name="Hip Evaluation",
    region_label="hip",
    description="Hip joint mobility, strength, and functional assessment",
    subjective="Patient history, pain description, functional limitations, activity modifications...",
    categories={
        "Observation": ["Gait Pattern", "Pelvic Alignment", "Leg Length Discrepancy"],
        "Palpation": ["Greater Trochanter", "ASIS", "Hip Joint Line"],
        "Range of Motion": [
            "Hip Flexion",
            "Hip Extension",
            "Hip Abduction",
            "Hip Adduction",
            "Internal Rotation",
            "External Rotation",
        ],
        "Strength Testing": [
            "Hip Flexors",
            "Hip Extensors",
            "Hip Abductors (Glute Med)",
            "Hip Adductors",
        ],
        "Special Tests": ["FABER Test", "FADIR Test", "Thomas Test", "Ober Test", "Trendelenburg Test"],
        "Functional Testing": ["Single Leg Stance", "Step-Up", "Squat Assessment"],
    },
    focus=[
        "Focus on hip joint mobility, glute strength and intra-articular versus lateral hip findings",
    ],
)

ANKLE_FOOT = TemplateDefinition(
    key="ankle_foot",
    name="Ankle/Foot Evaluation",
    profession=Profession.PHYSICAL_THERAPY,
    category=TemplateCategory.BODY_PART,
    session_type="evaluation",
    body_region="ankle_foot",
    description="Lower extremity assessment including gait analysis",
    role="You are a physical therapist documenting an ankle/foot evaluation.",
    focus=[
        "Focus on ankle stability testing, gait analysis and weight bearing status",
        "Consider ankle sprain, Achilles pathology and plantar fasciitis in the assessment",
    ],
    sections={
        "subjective": wysiwyg(
            "Patient history, pain description, mechanism of injury, functional limitations, gait issues..."
        ),
        "objective": table(
            [
                "Anterior Drawer Test",
                "Talar Tilt Test",
                "Thompson Test",
                "Kleiger Test",
                "Windlass Test",
                "Ankle Dorsiflexion ROM",
                "Ankle Plantarflexion ROM",
                "Inversion ROM",
                "Eversion ROM",
                "Calf Strength",
                "Dorsiflexor Strength",
                "Gait Assessment",
                "Balance Assessment",
                "Weight Bearing Status",
            ],
            common_results=["Positive", "Negative", "Not Tested", "WNL", "Limited", "Painful", "Antalgic", "Normal"],
        ),
        "assessment": wysiwyg(
            "Clinical impression, ankle sprain, plantar fasciitis, gait dysfunction, prognosis..."
        ),
        "plan": wysiwyg(
            "Treatment plan, strengthening exercises, gait training, balance work, patient education..."
        ),
    },
)

TEMPLATES: list[TemplateDefinition] = [
    DAILY_NOTE,
    DISCHARGE,
    KNEE,
    SHOULDER,
    BACK,
    NECK,
    HIP,
    ANKLE_FOOT,
]
