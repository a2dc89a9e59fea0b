# %% [markdown]
# # Building VR scenes from data
#
# vrstudio turns data into [A-Frame](https://aframe.io) scenes you can look at
# in a browser or a VR headset. This guide shows two ways to make a 3D
# scatterplot:
#
# 1. handing the data to a community-built A-Frame component, and
# 2. assembling the plot ourselves from spheres, lines and text.
#
# We'll use a few rows of Edgar Anderson's iris measurements throughout.

# %%
iris = {
    "Sepal.Length": [5.1, 4.9, 4.7, 7.0, 6.4, 6.9, 6.3, 5.8, 7.1, 6.5],
    "Sepal.Width": [3.5, 3.0, 3.2, 3.2, 3.2, 3.1, 3.3, 2.7, 3.0, 3.0],
    "Petal.Length": [1.4, 1.4, 1.3, 4.7, 4.5, 4.9, 6.0, 5.1, 5.9, 5.8],
    "Species": ["setosa"] * 3 + ["versicolor"] * 3 + ["virginica"] * 4,
}

# %% [markdown]
# ## Using the aframe-scatterplot component
#
# [aframe-scatterplot](https://github.com/zcanter/aframe-scatterplot) does the
# scaling, axes and colouring for us. We embed the data in the page and name
# the columns to use; any other keyword is handed straight to the component.

# %%
from vrstudio.component import scatterplot

scatterplot(
    iris,
    x="Sepal.Length",
    y="Sepal.Width",
    z="Petal.Length",
    xlabel="Sepal length",
    ylabel="Sepal width",
    zlabel="Petal length",
    showFloor=True,
)

# %% [markdown]
# ## Building the plot from primitives
#
# When we want control over every element, `scatter3d` lays the plot out by
# hand. Each axis is scaled to fill a box of the given `dimensions`, points are
# coloured by species, and a legend is drawn to the side. Click a point to see
# its label; look away to hide it.

# %%
from vrstudio.scatter import scatter3d

plot = scatter3d(
    iris["Sepal.Length"],
    iris["Sepal.Width"],
    iris["Petal.Length"],
    iris["Species"],
    x_label="Sepal length",
    y_label="Sepal width",
    z_label="Petal length",
    colour_label="Species",
    labels=[f"{s} {i}" for i, s in enumerate(iris["Species"], start=1)],
    dimensions=(2, 2, 2),
    template="forest",
)
plot

# %% [markdown]
# Scenes are plain values. We can look inside them, for example to check where
# points ended up:

# %%
[p.position for p in plot.select("point")][:3]

# %% [markdown]
# Any palette function works, as long as it returns one colour per level:

# %%
from vrstudio.palette import grey

scatter3d(
    iris["Sepal.Length"],
    iris["Sepal.Width"],
    iris["Petal.Length"],
    iris["Species"],
    x_label="Sepal length",
    y_label="Sepal width",
    z_label="Petal length",
    palette=grey,
    sizes=0.08,
)

# %% [markdown]
# To share a scene, save it as a standalone page:

# %%
plot.save_html("scratch/iris.html")
