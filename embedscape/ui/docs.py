"""Documentation tab content."""

import streamlit as st


def render_methodology_tab() -> None:
    """Render the Methodology explanation tab."""
    st.markdown("""
## How Embedscape Works

### Embeddings: Turning Text into Numbers

Each text is sent to an OpenAI-compatible embeddings endpoint and comes back as a
high-dimensional vector. Texts with similar meaning get similar vectors.

### PCA: Flattening to 2D or 3D

The vectors of one batch are reduced with **principal component analysis**:

1. Subtract the mean vector from every vector
2. Find the directions of largest variance (eigenvectors of the covariance matrix,
   or of the smaller N x N Gram matrix when vectors are wider than the batch)
3. Project every vector onto the top 2 or 3 directions

Only relative distances are meaningful. An axis may come out mirrored from one run to
the next, and a batch with a single text lands on the origin.

### Exploring

- **Number of points** shows the first N points of the batch, in input order
- **Spacing factor** multiplies every coordinate, spreading points apart or pulling them together
- **3D View** renders a scene you can orbit, pan and zoom; the camera stays where you left it
  when the data changes
- Hover any point to see its text (and author in 3D)
""")
