"""Chiropractic templates: spinal-region adjustments plus extremity and maintenance visits."""

from typing import Any, Optional

from soap_scribe.templates.models import Profession, TemplateCategory, TemplateDefinition
from soap_scribe.templates.schema import (
    billing_section,
    categorized_table,
    composite,
    list_section,
    wysiwyg,
)

_BASE_RESULTS = ["WNL", "Not Tested", "Present", "Absent", "Fixated", "Hypomobile", "Hypermobile", "Restricted"]


def _adjustment(
    key: str,
    name: str,
    description: str,
    role: str,
    subjective: str,
    categories: dict[str, list[str]],
    common_results: list[str],
    focus: list[str],
    subluxation_placeholder: str,
    necessity_placeholder: str,
    adjustments_placeholder: str,
    techniques_placeholder: str,
    supportive_placeholder: str,
    education_placeholder: str,
    frequency_placeholder: str = "Treatment frequency, expected duration, re-evaluation schedule...",
    category: TemplateCategory = TemplateCategory.SPINAL_REGION,
    session_type: str = "adjustment",
    spinal_region: Optional[str] = None,
) -> TemplateDefinition:
    sections: dict[str, Any] = {
        "subjective": wysiwyg(subjective),
        "objective": categorized_table(
            categories,
            headers=["Category", "Segment/Test", "Finding", "Notes"],
            common_results=common_results,
        ),
        "assessment": composite(
            subluxation_findings=wysiwyg(subluxation_placeholder),
            clinical_impression=wysiwyg("Clinical reasoning, diagnosis, contributing factors, prognosis..."),
            medical_necessity=wysiwyg(necessity_placeholder),
            short_term_goals=list_section("Goals for 2-4 weeks of care"),
            long_term_goals=list_section("Goals for 6-12 weeks of care"),
        ),
        "plan": composite(
            adjustments_performed=list_section(adjustments_placeholder),
            techniques_used=list_section(techniques_placeholder),
            supportive_care=list_section(supportive_placeholder),
            frequency_duration=wysiwyg(frequency_placeholder),
            patient_education=wysiwyg(education_placeholder),
        ),
        "billing": billing_section("CPT codes for chiropractic services"),
    }
    return TemplateDefinition(
        key=key,
        name=name,
        profession=Profession.CHIROPRACTIC,
        category=category,
        session_type=session_type,
        spinal_region=spinal_region,
        description=description,
        role=role,
        focus=focus,
        sections=sections,
    )


CERVICAL = _adjustment(
    key="cervical-adjustment",
    name="Cervical Adjustment",
    description="Cervical spine subluxation assessment and adjustment (C1-C7)",
    role="You are a chiropractor documenting a cervical spine assessment and adjustment.",
    spinal_region="cervical",
    subjective="Chief complaint, neck pain patterns, headaches, radiation, mechanism of injury...",
    categories={
        "Postural Assessment": [
            "Forward Head Posture", "Lateral Head Tilt", "Shoulder Level", "Cervical Lordosis",
        ],
        "Static Palpation": [
            "C1 (Atlas)", "C2 (Axis)", "C3-C4", "C5-C6", "C7",
            "Paraspinal Musculature", "Suboccipital Muscles",
        ],
        "Motion Palpation": [
            "C0-C1 Flexion/Extension", "C1-C2 Rotation", "C2-C3 Motion",
            "C3-C4 Motion", "C4-C5 Motion", "C5-C6 Motion", "C6-C7 Motion",
        ],
        "Range of Motion": [
            "Cervical Flexion", "Cervical Extension", "Left Lateral Flexion",
            "Right Lateral Flexion", "Left Rotation", "Right Rotation",
        ],
        "Orthopedic/Neurological Tests": [
            "Cervical Compression", "Cervical Distraction", "Shoulder Depression",
            "Upper Limb Tension Test", "Deep Tendon Reflexes", "Dermatomal Sensation",
        ],
        "Subluxation Analysis": [f"C{n} Listing" for n in range(1, 8)],
        "X-Ray Findings": ["Cervical Curve", "Disc Spaces", "Degenerative Changes", "Alignment"],
    },
    common_results=_BASE_RESULTS + [
        "PL", "PR", "PI", "PS", "AL", "AR", "AI", "AS", "PL-S", "PR-S", "PL-I", "PR-I",
        "Adjusted", "Not Adjusted", "Tender", "Hypertonic",
    ],
    focus=[
        "Focus on cervical spine (C1-C7) subluxation analysis and adjustment findings",
        "Document vertebral listings using standard notation (PL, PR, PI, PS, AL, AR, etc.)",
        "Include adjustment techniques used (Diversified, Gonstead, Activator, Drop Table, etc.)",
    ],
    subluxation_placeholder="Vertebral subluxation complex findings, listings, biomechanical dysfunction...",
    necessity_placeholder=(
        "Why chiropractic care is needed: functional limitations, pain levels, impact on daily activities..."
    ),
    adjustments_placeholder="Specific adjustments with segment, listing, and technique (e.g., C5 PL-I Diversified)",
    techniques_placeholder="Diversified, Gonstead, Activator, Drop Table, etc.",
    supportive_placeholder="Modalities, traction, soft tissue work, exercises...",
    education_placeholder="Posture advice, ergonomic recommendations, home exercises, precautions...",
)

THORACIC = _adjustment(
    key="thoracic-adjustment",
    name="Thoracic Adjustment",
    description="Thoracic spine and rib assessment with adjustment (T1-T12)",
    role="You are a chiropractor documenting a thoracic spine assessment and adjustment.",
    spinal_region="thoracic",
    subjective="Chief complaint, mid-back pain patterns, rib pain, breathing issues, mechanism of injury...",
    categories={
        "Postural Assessment": [
            "Thoracic Kyphosis", "Scoliosis Assessment", "Shoulder Level", "Scapular Position",
        ],
        "Static Palpation": [
            "T1-T4 (Upper Thoracic)", "T5-T8 (Mid Thoracic)", "T9-T12 (Lower Thoracic)",
            "Paraspinal Musculature", "Rhomboids", "Intercostal Spaces",
        ],
        "Motion Palpation": [
            "T1-T2 Motion", "T3-T4 Motion", "T5-T6 Motion",
            "T7-T8 Motion", "T9-T10 Motion", "T11-T12 Motion",
        ],
        "Rib Assessment": [
            "Rib 1-2 Motion", "Rib 3-5 Motion", "Rib 6-10 Motion",
            "Floating Ribs (11-12)", "Costotransverse Joints", "Costovertebral Joints",
        ],
        "Range of Motion": [
            "Thoracic Flexion", "Thoracic Extension", "Left Lateral Flexion",
            "Right Lateral Flexion", "Left Rotation", "Right Rotation",
        ],
        "Orthopedic/Neurological Tests": [
            "Rib Compression Test", "Kemp's Test", "Chest Expansion",
            "Deep Tendon Reflexes", "Dermatomal Sensation",
        ],
        "Subluxation Analysis": ["T1-T4 Listings", "T5-T8 Listings", "T9-T12 Listings", "Rib Subluxations"],
    },
    common_results=_BASE_RESULTS + [
        "PL", "PR", "PI", "PS", "PL-T", "PR-T",
        "Posterior Rib", "Anterior Rib", "Elevated Rib", "Depressed Rib",
        "Adjusted", "Not Adjusted", "Tender", "Hypertonic",
    ],
    focus=[
        "Focus on thoracic spine (T1-T12) and rib subluxation analysis",
        "Document vertebral listings and rib dysfunctions",
        "Include adjustment techniques used",
    ],
    subluxation_placeholder="Vertebral subluxation complex findings, rib dysfunction, listings...",
    necessity_placeholder=(
        "Why chiropractic care is needed: functional limitations, pain levels, breathing issues..."
    ),
    adjustments_placeholder="Specific adjustments with segment, listing, and technique",
    techniques_placeholder="Diversified, Drop Table, Activator, prone, supine positioning...",
    supportive_placeholder="Modalities, rib mobilization, breathing exercises...",
    education_placeholder="Posture advice, breathing exercises, sleeping position, activity modifications...",
)

LUMBAR = _adjustment(
    key="lumbar-adjustment",
    name="Lumbar Adjustment",
    description="Lumbar spine and pelvic assessment with adjustment (L1-L5, Sacrum)",
    role="You are a chiropractor documenting a lumbar spine assessment and adjustment.",
    spinal_region="lumbar",
    subjective="Chief complaint, low back pain patterns, leg pain/numbness, mechanism of injury...",
    categories={
        "Postural Assessment": ["Lumbar Lordosis", "Pelvic Tilt", "Pelvic Level", "Scoliosis/Lateral Shift"],
        "Static Palpation": [
            "L1-L2", "L3", "L4", "L5", "Sacrum", "SI Joints", "Paraspinal Musculature", "Piriformis",
        ],
        "Motion Palpation": [
            "L1-L2 Motion", "L2-L3 Motion", "L3-L4 Motion", "L4-L5 Motion", "L5-S1 Motion", "SI Joint Motion",
        ],
        "Pelvic Assessment": [
            "ASIS Level", "PSIS Level", "Leg Length (Supine)", "Leg Length (Prone)", "Sacral Base",
        ],
        "Range of Motion": [
            "Lumbar Flexion", "Lumbar Extension", "Left Lateral Flexion",
            "Right Lateral Flexion", "Left Rotation", "Right Rotation",
        ],
        "Orthopedic/Neurological Tests": [
            "Straight Leg Raise (L)", "Straight Leg Raise (R)", "Kemp's Test", "SI Provocation Tests",
            "Valsalva/Dejerine", "Deep Tendon Reflexes", "Dermatomal Sensation", "Motor Strength (L4-S1)",
        ],
        "Subluxation Analysis": [
            "L1 Listing", "L2 Listing", "L3 Listing", "L4 Listing", "L5 Listing",
            "Sacral Listing", "Ilium Listing",
        ],
    },
    common_results=_BASE_RESULTS + [
        "PL", "PR", "PI", "PS", "PL-M", "PR-M",
        "PI-Ex", "AS-In", "In-Ex", "Base Posterior", "Base Anterior",
        "Adjusted", "Not Adjusted", "Tender", "Hypertonic",
    ],
    focus=[
        "Focus on lumbar spine (L1-L5), sacrum, and pelvic subluxation analysis",
        "Document vertebral listings, pelvic misalignments, and SI joint dysfunction",
        "Include adjustment techniques used (Diversified, Gonstead, Drop Table, SOT, Flexion-Distraction)",
    ],
    subluxation_placeholder="Lumbar subluxation complex findings, pelvic dysfunction, listings...",
    necessity_placeholder=(
        "Why chiropractic care is needed: functional limitations, pain levels, impact on ADLs..."
    ),
    adjustments_placeholder="Specific adjustments with segment, listing, and technique",
    techniques_placeholder="Diversified, Gonstead, Drop Table, SOT, Flexion-Distraction...",
    supportive_placeholder="Modalities, flexion-distraction, exercises, traction...",
    education_placeholder="Lifting mechanics, core exercises, sleeping position, activity modifications...",
)

FULL_SPINE = _adjustment(
    key="full-spine-adjustment",
    name="Full Spine Evaluation",
    description="Comprehensive spinal assessment from occiput to sacrum",
    role="You are a chiropractor documenting a comprehensive full spine evaluation.",
    spinal_region="full",
    session_type="evaluation",
    subjective="Chief complaint, pain patterns, history of present illness, past medical history...",
    categories={
        "Postural Assessment": [
            "Head Position", "Cervical Lordosis", "Shoulder Level", "Thoracic Kyphosis",
            "Lumbar Lordosis", "Pelvic Tilt/Level", "Overall Spinal Alignment",
        ],
        "Cervical Spine (C1-C7)": ["C1-C2 (Upper Cervical)", "C3-C4", "C5-C6", "C7-T1", "Cervical ROM"],
        "Thoracic Spine (T1-T12)": [
            "T1-T4 (Upper)", "T5-T8 (Mid)", "T9-T12 (Lower)", "Rib Cage Assessment", "Thoracic ROM",
        ],
        "Lumbar Spine (L1-L5)": ["L1-L2", "L3-L4", "L5-S1", "Lumbar ROM"],
        "Pelvis & Sacrum": ["Sacral Base", "Right SI Joint", "Left SI Joint", "Leg Length", "Ilium Position"],
        "Neurological Screening": [
            "Upper Extremity DTRs", "Lower Extremity DTRs", "Sensation Screening", "Motor Strength",
        ],
        "Full Spine Subluxation Analysis": [
            "Primary Subluxation", "Secondary Subluxation(s)", "Compensatory Patterns", "Overall Spine Pattern",
        ],
    },
    common_results=_BASE_RESULTS + [
        "PL", "PR", "PI", "PS", "AL", "AR",
        "Adjusted", "Not Adjusted", "Tender", "Hypertonic",
        "Normal", "Reduced", "Increased", "Reversed",
    ],
    focus=[
        "Cover ALL spinal regions: Cervical (C1-C7), Thoracic (T1-T12), Lumbar (L1-L5), Sacrum, Pelvis",
        "Document primary and secondary subluxations with compensatory patterns",
        "Include adjustment techniques used for each region",
        "This is typically an initial evaluation - be thorough",
    ],
    subluxation_placeholder="Complete subluxation complex analysis across all spinal regions...",
    necessity_placeholder="Why comprehensive chiropractic care is needed...",
    adjustments_placeholder="All adjustments performed with segment, listing, and technique",
    techniques_placeholder="Diversified, Gonstead, Activator, Drop Table, Toggle, SOT...",
    supportive_placeholder="Modalities, exercises, traction, rehabilitation...",
    education_placeholder="Comprehensive home care, exercises, lifestyle modifications...",
    frequency_placeholder="Treatment frequency, phases of care, re-evaluation schedule...",
)

EXTREMITY = _adjustment(
    key="extremity-adjustment",
    name="Extremity Adjustment",
    description="Joint assessment and adjustment for upper/lower extremities",
    role="You are a chiropractor documenting an extremity assessment and adjustment.",
    category=TemplateCategory.SPECIALIZED,
    subjective="Chief complaint, extremity pain patterns, mechanism of injury, functional limitations...",
    categories={
        "Upper Extremity - Shoulder": [
            "AC Joint", "Glenohumeral Joint", "Scapulothoracic Motion", "Shoulder ROM",
        ],
        "Upper Extremity - Elbow/Wrist/Hand": [
            "Elbow Joint", "Radial Head", "Wrist/Carpal Bones", "Hand/Finger Joints",
        ],
        "Lower Extremity - Hip": [
            "Hip Joint Mobility", "Hip Flexion/Extension",
            "Hip Internal/External Rotation", "Hip Abduction/Adduction",
        ],
        "Lower Extremity - Knee": [
            "Tibiofemoral Joint", "Patellofemoral Joint", "Proximal Tibiofibular", "Knee ROM",
        ],
        "Lower Extremity - Ankle/Foot": [
            "Talocrural Joint", "Subtalar Joint", "Midfoot Joints", "Metatarsals/Phalanges", "Ankle ROM",
        ],
        "Orthopedic Tests": [
            "Relevant Orthopedic Test 1", "Relevant Orthopedic Test 2", "Relevant Orthopedic Test 3",
        ],
        "Extremity Subluxation Analysis": [
            "Primary Joint Dysfunction", "Secondary Dysfunction", "Compensatory Patterns",
        ],
        "Related Spinal Segments": [
            "Cervical (if upper extremity)", "Thoracic (if applicable)", "Lumbar/Pelvis (if lower extremity)",
        ],
    },
    common_results=_BASE_RESULTS + [
        "Anterior", "Posterior", "Superior", "Inferior",
        "Internal", "External", "Medial", "Lateral",
        "Adjusted", "Not Adjusted", "Tender", "Crepitus",
    ],
    focus=[
        "Focus on the specific extremity joint(s) involved (shoulder, elbow, wrist, hip, knee, ankle, foot)",
        "Document joint fixation patterns and directional dysfunction",
        "Include related spinal segments that may contribute",
        "Include adjustment techniques used (long axis distraction, drop table, mobilization)",
    ],
    subluxation_placeholder=(
        "Extremity joint dysfunction findings, fixation patterns, related spinal involvement..."
    ),
    necessity_placeholder=(
        "Why extremity adjustment is needed: joint dysfunction, functional limitations..."
    ),
    adjustments_placeholder="Extremity adjustments with joint, direction, and technique",
    techniques_placeholder="Extremity adjusting techniques, mobilization, manipulation...",
    supportive_placeholder="Modalities, taping, exercises, bracing...",
    education_placeholder="Home exercises, activity modifications, ergonomic advice, protective measures...",
)

MAINTENANCE = TemplateDefinition(
    key="maintenance-care",
    name="Maintenance Care",
    profession=Profession.CHIROPRACTIC,
    category=TemplateCategory.SPECIALIZED,
    session_type="maintenance",
    description="Wellness and preventive care documentation",
    role="You are a chiropractor documenting a maintenance/wellness care visit.",
    focus=[
        "This is a MAINTENANCE/WELLNESS visit, not an acute care visit",
        "Focus on current status, stability of previous corrections, and preventive care",
        "Document current subluxation status compared to previous visits",
        "Emphasize wellness, prevention, and maintaining spinal health",
        "Keep documentation concise but complete for routine visit",
    ],
    sections={
        "subjective": wysiwyg("Current status since last visit, any new complaints, overall wellness..."),
        "objective": categorized_table(
            {
                "Current Status": [
                    "Overall Spinal Status", "Pain Level (if any)", "Functional Status", "Activity Level",
                ],
                "Quick Postural Check": ["Head/Neck Position", "Shoulder Level", "Pelvic Level", "Overall Posture"],
                "Motion Palpation Findings": ["Cervical Spine", "Thoracic Spine", "Lumbar Spine", "Pelvis/Sacrum"],
                "Subluxation Check": ["Primary Finding", "Secondary Findings", "Comparison to Last Visit"],
                "Muscle Tone/Tension": [
                    "Cervical Paraspinals", "Thoracic Paraspinals", "Lumbar Paraspinals", "Other Notable Areas",
                ],
            },
            headers=["Category", "Area", "Status", "Notes"],
            common_results=[
                "WNL", "Stable", "Improved", "Unchanged", "Mild", "Moderate", "Resolved",
                "Fixated", "Hypomobile", "Free", "Adjusted", "Not Adjusted", "Monitored",
                "Maintaining", "Holding Adjustment",
            ],
        ),
        "assessment": composite(
            subluxation_findings=wysiwyg(
                "Current subluxation status, comparison to previous visits, holding patterns..."
            ),
            clinical_impression=wysiwyg(
                "Overall spinal health status, progress summary, stability of corrections..."
            ),
            medical_necessity=wysiwyg(
                "Why continued maintenance care is appropriate: prevention, wellness, stability..."
            ),
            wellness_status=wysiwyg(
                "Overall wellness assessment, lifestyle factors, patient-reported outcomes..."
            ),
        ),
        "plan": composite(
            adjustments_performed=list_section("Adjustments performed this visit"),
            techniques_used=list_section("Techniques applied"),
            supportive_care=list_section("Any additional care provided"),
            next_visit=wysiwyg("Recommended interval for next maintenance visit..."),
            wellness_recommendations=wysiwyg(
                "Exercise, nutrition, ergonomic, stress management recommendations..."
            ),
        ),
        "billing": composite(
            cpt_codes=list_section("CPT codes for maintenance visit"),
            units=wysiwyg("Time-based units"),
            icd10_codes=list_section("ICD-10 diagnosis codes"),
        ),
    },
)

TEMPLATES: list[TemplateDefinition] = [
    CERVICAL,
    THORACIC,
    LUMBAR,
    FULL_SPINE,
    EXTREMITY,
    MAINTENANCE,
]
